"""Unified settings — init kwargs, env vars, and manifest config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — values passed by the host adapter
  2. Env vars     — ``NSBRIDGE_*`` prefix
  3. Manifest     — ``extra.nsbridge`` plus ``config.vendor-dir`` of the
     root manifest discovered via :func:`find_manifest`
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`ManifestSettingsSource`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from nsbridge.config.discovery import MANIFEST_FILENAME, find_manifest
from nsbridge.config.models import LockUpdateConfig, RewriteConfig
from nsbridge.infrastructure.manifest import ManifestFile

EXTRA_KEY = "nsbridge"


def _normalize_keys(value: Any) -> Any:
    """Turn composer-style ``kebab-case`` keys into field names."""
    if isinstance(value, dict):
        return {str(k).replace("-", "_"): _normalize_keys(v) for k, v in value.items()}
    return value


class ManifestSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the root manifest's ``extra`` and ``config`` tables."""

    def __init__(self, settings_cls: type[BaseSettings], manifest_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if manifest_path and manifest_path.is_file():
            definition = ManifestFile(manifest_path).read()
            extra = definition.get("extra")
            if isinstance(extra, dict) and isinstance(extra.get(EXTRA_KEY), dict):
                self._data.update(_normalize_keys(extra[EXTRA_KEY]))
            config = definition.get("config")
            if isinstance(config, dict) and isinstance(config.get("vendor-dir"), str):
                self._data.setdefault("vendor_dir", config["vendor-dir"])

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the manifest data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for the manifest path during construction.
_tls = threading.local()


class BridgeSettings(BaseSettings):
    """Settings for one host invocation.

    Attributes:
        manifest_path: Root manifest the reconciler rewrites.
        working_dir: Directory holding the manifest; the nested lock
            update runs against it.
        vendor_dir: Host vendor directory, relative to *working_dir*
            unless absolute.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "NSBRIDGE_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved paths ---
    manifest_path: Path = Field(default_factory=lambda: Path.cwd() / MANIFEST_FILENAME)
    working_dir: Path = Field(default_factory=Path.cwd)
    vendor_dir: Path = Path("vendor")

    # --- Output ---
    verbose: bool = False
    log_json: bool = False

    # --- Manifest sections ---
    rewrite: RewriteConfig = Field(default_factory=RewriteConfig)
    lock_update: LockUpdateConfig = Field(default_factory=LockUpdateConfig)

    @property
    def resolved_vendor_dir(self) -> Path:
        if self.vendor_dir.is_absolute():
            return self.vendor_dir
        return self.working_dir / self.vendor_dir

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the manifest source between env vars and defaults."""
        manifest_path = getattr(_tls, "manifest_path", None)
        return (
            init_settings,
            env_settings,
            ManifestSettingsSource(settings_cls, manifest_path),
        )

    @classmethod
    def discover(
        cls,
        *,
        manifest_path: str | Path | None = None,
        working_dir: Path | None = None,
        **overrides: Any,
    ) -> BridgeSettings:
        """Construct settings for a host invocation.

        Uses *manifest_path* when given, otherwise discovers the manifest
        from *working_dir* (or cwd). The working directory is always the
        directory holding the manifest once one is found.
        """
        resolved_manifest: Path | None
        if manifest_path is not None:
            resolved_manifest = Path(manifest_path)
        else:
            resolved_manifest = find_manifest(working_dir)

        if resolved_manifest is not None:
            working_dir = resolved_manifest.parent
        else:
            working_dir = working_dir or Path.cwd()
            resolved_manifest = working_dir / MANIFEST_FILENAME

        _tls.manifest_path = resolved_manifest
        try:
            return cls(
                manifest_path=resolved_manifest,
                working_dir=working_dir,
                **overrides,
            )
        finally:
            _tls.manifest_path = None
