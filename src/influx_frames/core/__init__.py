"""Core data types for decoded responses and produced frames."""
