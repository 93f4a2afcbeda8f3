"""Cross-cutting infrastructure: configuration and structured logging."""
