"""
Delivery-zone catalog.

Maps postal codes to fee, minimum order and ETA. The static table covers the
launch area; ``SqlZoneCatalog`` reads the same shape from a maintained table.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from models.delivery import ZoneRecord
from repositories.zone_repo import DeliveryZoneRepository
from utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_ZONES = (
    ZoneRecord(postal_code="400001", area="Fort", fee=30, min_order=200, eta_label="30-40 mins"),
    ZoneRecord(postal_code="400002", area="Kalbadevi", fee=35, min_order=200, eta_label="35-45 mins"),
    ZoneRecord(postal_code="400003", area="Marine Lines", fee=40, min_order=250, eta_label="40-50 mins"),
    ZoneRecord(postal_code="400004", area="Girgaon", fee=35, min_order=200, eta_label="35-45 mins"),
    ZoneRecord(postal_code="400005", area="Colaba", fee=45, min_order=300, eta_label="45-55 mins"),
)


class ZoneCatalog(Protocol):
    """Anything that maps a postal code to a zone row."""

    def lookup(self, postal_code: str) -> Optional[ZoneRecord]:
        ...


class StaticZoneCatalog:
    """In-process zone table."""

    def __init__(self, zones: Iterable[ZoneRecord] = DEFAULT_ZONES):
        self._zones: Dict[str, ZoneRecord] = {zone.postal_code: zone for zone in zones}

    def lookup(self, postal_code: str) -> Optional[ZoneRecord]:
        return self._zones.get((postal_code or "").strip())


class SqlZoneCatalog:
    """Zone table kept in a SQL database (``delivery_zones``)."""

    def __init__(self, repository: DeliveryZoneRepository):
        self.repository = repository

    @classmethod
    def from_url(cls, db_url: str) -> "SqlZoneCatalog":
        return cls(DeliveryZoneRepository.from_url(db_url))

    def lookup(self, postal_code: str) -> Optional[ZoneRecord]:
        """Return the zone row, or None on a miss or when the database is unreachable."""
        try:
            return self.repository.find_zone((postal_code or "").strip())
        except SQLAlchemyError as exc:
            logger.warning(
                "Zone catalog lookup failed; treating as miss",
                extra={"postal_code": postal_code, "error": str(exc)},
            )
            return None
