"""Cross-cutting infrastructure: configuration, extensions, logging and errors."""
