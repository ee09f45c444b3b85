"""Package argument rewriting for host commands.

``require zendframework/zend-mvc:^3.1`` asks for a package that should
never be installed again. Before the host parses such a command, each
requested package with a replacement is renamed, keeping whatever
constraint followed the name.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from nsbridge.domain.names import has_replacement, transform_package_name

REWRITTEN_COMMANDS: frozenset[str] = frozenset({"require", "update"})

# name, then an optional constraint separated by a space, colon, or equals sign.
_ARGUMENT_SEPARATOR = re.compile(r"[ :=]")

logger = logging.getLogger(__name__)


def rewrite_package_argument(argument: str) -> str:
    """Rename the package in a single ``name[sep constraint]`` argument."""
    name = _ARGUMENT_SEPARATOR.split(argument, maxsplit=1)[0]
    if not has_replacement(name):
        return argument

    replacement = transform_package_name(name)
    logger.debug("Changing package in current command from %s to %s", name, replacement)
    return replacement + argument[len(name) :]


class CommandArgumentRewriter:
    """Rewrite the ``packages`` argument of ``require`` and ``update``."""

    def rewrite(self, command: str, packages: Sequence[str]) -> list[str]:
        if command not in REWRITTEN_COMMANDS:
            return list(packages)
        return [rewrite_package_argument(argument) for argument in packages]
