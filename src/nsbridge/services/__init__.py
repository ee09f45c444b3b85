"""Service layer — the dependency-substitution core.

INVARIANT: All service operations return ServiceResult, except that
manifest, installed-record and nested lock-update failures propagate.
"""
