"""Application wiring: configuration, composition root and CLI entry point."""
