"""Deprecated namespace classification and replacement naming.

Zend Framework and Apigility packages (``zendframework/*``, ``zfcampus/*``)
were renamed to ``laminas/*``, ``laminas-api-tools/*`` and ``mezzio/*``.
The mapping is computed from name patterns; nothing is looked up.

INVARIANT: transform_package_name is idempotent. Replacement names never
start with a deprecated vendor prefix.
"""

from __future__ import annotations

DEPRECATED_VENDOR_PREFIXES: tuple[str, ...] = ("zendframework/", "zfcampus/")

# Deprecated packages that were retired rather than renamed.
NO_REPLACEMENT: frozenset[str] = frozenset(
    {
        "zendframework/zend-debug",
        "zendframework/zend-version",
        "zendframework/zendframework",
        "zendframework/zendservice-amazon",
        "zendframework/zendservice-apple-apns",
        "zendframework/zendservice-google-gcm",
        "zendframework/zendservice-recaptcha",
        "zendframework/zendservice-twitter",
        "zendframework/zendxml",
        "zfcampus/zf-apigility-example",
        "zfcampus/zf-angular",
        "zfcampus/zf-console",
        "zfcampus/zf-deploy",
        "zfcampus/zf-rpc",
        "zfcampus/zf-versioning",
    }
)

EXPLICIT_REPLACEMENTS: dict[str, str] = {
    "zendframework/zend-expressive-swoole": "mezzio/mezzio-swoole",
    "zendframework/zend-problem-details": "mezzio/mezzio-problem-details",
    "zendframework/zend-expressive-zendrouter": "mezzio/mezzio-laminasrouter",
    "zendframework/zend-expressive-zendviewrenderer": "mezzio/mezzio-laminasviewrenderer",
    "zfcampus/zf-apigility": "laminas-api-tools/api-tools",
    "zfcampus/zf-composer-autoloading": "laminas/laminas-composer-autoloading",
    "zfcampus/zf-development-mode": "laminas/laminas-development-mode",
}

# Ordered: the first matching prefix wins.
PREFIX_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("zendframework/zend-expressive", "mezzio/mezzio"),
    ("zfcampus/zf-apigility", "laminas-api-tools/api-tools"),
    ("zfcampus/zf-", "laminas-api-tools/api-tools-"),
    ("zendframework/zend-", "laminas/laminas-"),
)


def is_deprecated_package(name: str) -> bool:
    """Return True if *name* lives in a deprecated vendor namespace.

    Case-sensitive prefix match on the ``vendor/`` part only, so
    ``laminas/laminas-zendframework-bridge`` is not deprecated.
    """
    return name.startswith(DEPRECATED_VENDOR_PREFIXES)


def transform_package_name(name: str) -> str:
    """Return the replacement name for *name*, or *name* if there is none."""
    if name in NO_REPLACEMENT:
        return name

    explicit = EXPLICIT_REPLACEMENTS.get(name)
    if explicit is not None:
        return explicit

    for prefix, replacement in PREFIX_REPLACEMENTS:
        if name.startswith(prefix):
            return replacement + name[len(prefix) :]

    return name


def has_replacement(name: str) -> bool:
    """Whether *name* is deprecated and maps to a different package name."""
    return is_deprecated_package(name) and transform_package_name(name) != name
