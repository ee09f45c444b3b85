"""Configuration layer — settings, manifest discovery, logging."""
