"""Command-line interface for guesty-mcp."""
