"""AI task extraction and breakdown."""

from .assistant import AIAssistant, OpenAIAssistant

__all__ = ["AIAssistant", "OpenAIAssistant"]
