"""Command-line interface for llmprep."""
