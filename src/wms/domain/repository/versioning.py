"""Optimistic version check shared by repository implementations.

Every versioned aggregate (orders, lots, locations) is saved with
compare-and-swap semantics: the stored version must still equal the one
the caller loaded, otherwise someone else wrote in between.
"""

from __future__ import annotations

from wms.domain.exceptions import ConcurrencyConflictError


def check_version(kind: str, entity_id: object, stored: int | None, loaded: int) -> None:
    """Raise ConcurrencyConflictError if *loaded* is stale.

    *stored* is None when the entity has never been saved.
    """
    expected = 0 if stored is None else stored
    if loaded != expected:
        raise ConcurrencyConflictError(
            f"{kind} {entity_id} was modified concurrently "
            f"(loaded version {loaded}, stored version {expected}); "
            f"reload and retry"
        )
