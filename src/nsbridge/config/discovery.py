"""Root manifest discovery.

The ``COMPOSER`` env var names the manifest explicitly, the same override
the host honours. Otherwise walk up from the working directory looking for
``composer.json``, similar to how git finds .git/.
"""

from __future__ import annotations

import os
from pathlib import Path

MANIFEST_FILENAME = "composer.json"
MANIFEST_ENV_VAR = "COMPOSER"


def find_manifest(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for the root manifest.

    Returns the path to the manifest, or None if not found.
    A relative ``COMPOSER`` value is resolved against *start*.
    """
    base = (start or Path.cwd()).resolve()

    env_path = os.environ.get(MANIFEST_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if not p.is_absolute():
            p = base / p
        if p.is_file():
            return p
        return None

    current = base
    while True:
        candidate = current / MANIFEST_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None
