"""Abstract repositories for Location and Zone aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod

from wms.domain.model.location import Location, Zone


class LocationRepository(ABC):

    @abstractmethod
    def get_by_id(self, location_id: str) -> Location | None:
        """Return a detached copy of a location, or None."""

    @abstractmethod
    def list_all(self) -> list[Location]:
        """Return every location."""

    @abstractmethod
    def save(self, location: Location) -> None:
        """Persist with a version check and bump ``location.version``."""


class ZoneRepository(ABC):

    @abstractmethod
    def get_by_id(self, zone_id: str) -> Zone | None:
        """Return a zone, or None."""

    @abstractmethod
    def list_all(self) -> list[Zone]:
        """Return every zone."""

    @abstractmethod
    def save(self, zone: Zone) -> None:
        """Persist a new or updated zone."""
