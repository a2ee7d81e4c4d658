"""Taskboard - personal task manager API with an AI assistant."""

__version__ = "1.0.0"
