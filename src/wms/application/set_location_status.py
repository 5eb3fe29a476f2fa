"""Application service: Block / Unblock Location use case.

Blocking stops new stock from being placed; what is already stored can
still be released, shipped or moved out.
"""

from __future__ import annotations

import logging

from wms.domain.exceptions import NotFoundError
from wms.domain.model.location import Location
from wms.domain.repository.location_repository import LocationRepository
from wms.domain.service.locking import DEFAULT_LOCKS, KeyedLocks, location_key

logger = logging.getLogger(__name__)


class SetLocationStatusHandler:

    def __init__(
        self,
        location_repo: LocationRepository,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._location_repo = location_repo
        self._locks = locks or DEFAULT_LOCKS

    def handle(self, location_id: str, blocked: bool) -> Location:
        with self._locks.hold(location_key(location_id)):
            location = self._location_repo.get_by_id(location_id)
            if location is None:
                raise NotFoundError(f"Location '{location_id}' not found")

            if blocked:
                location.block()
            else:
                location.unblock()
            self._location_repo.save(location)

        logger.info("Location %s is now %s", location.code, location.status.value)
        return location
