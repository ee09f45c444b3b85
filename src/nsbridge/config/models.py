"""Pydantic configuration models with code-baked defaults.

Sparse contract: defaults live here, the manifest's ``extra.nsbridge``
table only carries overrides. Keys may be written composer-style
(``lock-update``) or Python-style (``lock_update``).
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_LOCK_COMMAND: tuple[str, ...] = ("update", "--lock", "--no-scripts")


class RewriteConfig(BaseModel):
    """[extra.nsbridge.rewrite] section."""

    model_config = {"frozen": True}

    pool_interception: bool = True
    install_tracking: bool = True
    command_arguments: bool = True


class LockUpdateConfig(BaseModel):
    """[extra.nsbridge.lock-update] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    command: tuple[str, ...] = Field(default=DEFAULT_LOCK_COMMAND, min_length=1)
