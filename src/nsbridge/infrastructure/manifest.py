"""Root manifest (``composer.json``) read and write-back.

The document is read and written as a whole. Key order is preserved, so
keys nsbridge never touches come back out exactly where they were.
Output follows the host's own formatting: four-space indent, unescaped
slashes and unicode, trailing newline.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click

logger = logging.getLogger(__name__)


class ManifestError(click.ClickException):
    """The root manifest could not be read, parsed, or written."""


class ManifestFile:
    """A JSON manifest on disk."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> dict[str, Any]:
        """Parse the manifest. Raises :class:`ManifestError` on any failure."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Could not read {self._path}: {exc}"
            raise ManifestError(msg) from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON in {self._path}: {exc}"
            raise ManifestError(msg) from exc

        if not isinstance(data, dict):
            msg = f"{self._path} does not contain a JSON object"
            raise ManifestError(msg)
        return data

    def write(self, definition: dict[str, Any]) -> None:
        """Serialize *definition* back over the manifest file."""
        rendered = json.dumps(definition, indent=4, ensure_ascii=False) + "\n"
        try:
            self._path.write_text(rendered, encoding="utf-8")
        except OSError as exc:
            msg = f"Could not write {self._path}: {exc}"
            raise ManifestError(msg) from exc
        logger.debug("Wrote manifest %s", self._path)
