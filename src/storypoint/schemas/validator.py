"""JSON Schema checks for override and task files."""

from typing import Any

from jsonschema.validators import Draft202012Validator

from storypoint.utils.schema_registry import get_registry


def validate_data(data: dict[str, Any], schema_name: str) -> list[str]:
    """Return human-readable violations of a packaged schema, empty when valid.

    Messages are prefixed with the dotted path of the offending value
    (``slices.0.layer: 'basement' is not one of ...``) and sorted by path.
    """
    validator = Draft202012Validator(get_registry().get_json(schema_name))
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    return [
        f"{'.'.join(str(p) for p in error.absolute_path)}: {error.message}" if error.absolute_path else error.message
        for error in errors
    ]
