"""JSON Schemas for storypoint input files (package data)."""
