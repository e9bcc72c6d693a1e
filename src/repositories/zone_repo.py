"""Delivery-zone rows kept in a SQL table, read with SQLAlchemy Core."""

from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from models.delivery import ZoneRecord

ZONE_QUERY = text(
    """
    SELECT postal_code, area, fee, min_order, eta_label, serviceable
    FROM delivery_zones
    WHERE postal_code = :postal_code
    """
)


class DeliveryZoneRepository:
    """Reads the ``delivery_zones`` table one postal code at a time."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, db_url: str) -> "DeliveryZoneRepository":
        return cls(create_engine(db_url, pool_pre_ping=True, pool_recycle=300))

    def find_zone(self, postal_code: str) -> Optional[ZoneRecord]:
        """
        Return the zone for ``postal_code`` or None when no row matches.

        ``serviceable`` is stored as an integer flag on engines without a
        boolean type.
        """
        with self.engine.connect() as conn:
            row = conn.execute(ZONE_QUERY, {"postal_code": postal_code}).mappings().fetchone()
        if row is None:
            return None
        return ZoneRecord.model_validate({**row, "serviceable": bool(row["serviceable"])})
