"""Lock-only update via a re-entrant, in-process run of the host CLI.

After the reconciler removes deprecated packages, the lock file still
names them. Running the host's own ``update --lock --no-scripts`` brings
it back in line (and installs any replacement that is still missing).

The nested run goes through the same host, so it would fire our hooks
again. :func:`lock_update_active` is the recursion guard: it is set for
the duration of the nested call and every lifecycle callback checks it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING

import click

from nsbridge.config.models import DEFAULT_LOCK_COMMAND

if TYPE_CHECKING:
    from nsbridge.host import ApplicationFactory

logger = logging.getLogger(__name__)

_lock_update_active: ContextVar[bool] = ContextVar("_lock_update_active", default=False)


def lock_update_active() -> bool:
    """Whether a nested lock-only update is running in this context."""
    return _lock_update_active.get()


class LockUpdateError(click.ClickException):
    """The nested lock-only update failed."""

    def __init__(self, message: str) -> None:
        super().__init__(
            f"{message}. The installed packages were already changed; "
            "run `update --lock` manually to bring the lock file in line."
        )


class LockFileUpdater:
    """Runs the host CLI in-process with process exit disabled.

    Parameters:
        application_factory: Returns the host's click entry point.
        working_dir: Directory holding the root manifest.
        command: Host arguments preceding ``--working-dir``.
    """

    def __init__(
        self,
        application_factory: ApplicationFactory,
        working_dir: Path,
        *,
        command: Sequence[str] = DEFAULT_LOCK_COMMAND,
    ) -> None:
        self._application_factory = application_factory
        self._working_dir = working_dir
        self._command = tuple(command)

    def build_args(self) -> list[str]:
        return [*self._command, "--working-dir", str(self._working_dir)]

    def update(self) -> None:
        """Run the nested update. Raises :class:`LockUpdateError` on failure."""
        if lock_update_active():
            logger.debug("Lock update already running; not nesting another one")
            return

        application = self._application_factory()
        args = self.build_args()
        logger.debug("Running nested host command: %s", " ".join(args))

        token = _lock_update_active.set(True)
        try:
            # standalone_mode=False: return the exit code instead of calling sys.exit().
            exit_code = application.main(args=args, standalone_mode=False)
        except click.ClickException as exc:
            raise LockUpdateError(f"Lock file update failed: {exc.format_message()}") from exc
        except click.Abort as exc:
            raise LockUpdateError("Lock file update was aborted") from exc
        except Exception as exc:
            raise LockUpdateError(f"Lock file update failed: {exc}") from exc
        finally:
            _lock_update_active.reset(token)

        if isinstance(exit_code, int) and not isinstance(exit_code, bool) and exit_code != 0:
            raise LockUpdateError(f"Lock file update exited with status {exit_code}")
