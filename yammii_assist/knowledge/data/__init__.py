"""Packaged knowledge base document and system prompt template."""
