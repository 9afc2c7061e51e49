"""Shared helpers for storypoint."""
