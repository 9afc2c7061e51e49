"""storypoint - slice-based agile story point estimation."""

__version__ = "0.1.0"
