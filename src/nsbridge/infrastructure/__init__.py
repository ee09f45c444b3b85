"""Infrastructure layer — manifest and installed-package files on disk."""
