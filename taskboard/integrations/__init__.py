"""External integrations: AI assistant and quick-add parsing."""
