"""
Customer state gateways.

The engine only needs ``load`` and ``save``. Both implementations keep writes
all-or-nothing and refuse to overwrite a snapshot that changed since it was
loaded (``version`` check), so a failed or racing save never corrupts the
previously persisted state.
"""

from __future__ import annotations

import json
from decimal import Decimal
from threading import Lock
from typing import Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from models.customer import CustomerSnapshot
from repositories.dynamodb_repo import DynamoDbRepository
from utils.error_handling import ConcurrentUpdateError, StorageError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class InMemoryCustomerStateGateway:
    """Process-local store for local runs and tests."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}
        self._lock = Lock()

    def load(self, identifier: str) -> Optional[CustomerSnapshot]:
        with self._lock:
            raw = self._items.get(identifier)
        return CustomerSnapshot.model_validate_json(raw) if raw else None

    def save(self, snapshot: CustomerSnapshot) -> CustomerSnapshot:
        """Persist ``snapshot`` and return it with the bumped version."""
        stored = snapshot.model_copy(update={"version": snapshot.version + 1})
        with self._lock:
            current = self._items.get(snapshot.identifier)
            current_version = CustomerSnapshot.model_validate_json(current).version if current else 0
            if current_version != snapshot.version:
                raise ConcurrentUpdateError()
            self._items[snapshot.identifier] = stored.model_dump_json()
        return stored

    def __len__(self) -> int:
        return len(self._items)


def _to_dynamo(snapshot: CustomerSnapshot) -> dict:
    """DynamoDB rejects floats; round-trip through JSON into Decimals."""
    return json.loads(snapshot.model_dump_json(), parse_float=Decimal)


def _from_dynamo(item: dict) -> CustomerSnapshot:
    def _number(value: Decimal):
        return int(value) if value == value.to_integral_value() else float(value)

    return CustomerSnapshot.model_validate_json(json.dumps(item, default=_number))


class DynamoDbCustomerStateGateway:
    """Snapshots stored as one DynamoDB item per identifier."""

    def __init__(self, table_name: str, repository: Optional[DynamoDbRepository] = None):
        self.repository = repository or DynamoDbRepository(table_name, key_name="identifier")

    def load(self, identifier: str) -> Optional[CustomerSnapshot]:
        try:
            item = self.repository.get(identifier)
        except (ClientError, BotoCoreError) as exc:
            logger.error("Snapshot load failed", extra={"identifier": identifier, "error": str(exc)})
            raise StorageError(f"Could not load customer {identifier}") from exc
        return _from_dynamo(item) if item else None

    def save(self, snapshot: CustomerSnapshot) -> CustomerSnapshot:
        stored = snapshot.model_copy(update={"version": snapshot.version + 1})
        try:
            self.repository.put_if_version(_to_dynamo(stored), expected_version=snapshot.version)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                logger.warning(
                    "Snapshot version conflict",
                    extra={"identifier": snapshot.identifier, "version": snapshot.version},
                )
                raise ConcurrentUpdateError() from exc
            logger.error(
                "Snapshot save failed",
                extra={"identifier": snapshot.identifier, "error": str(exc)},
            )
            raise StorageError(f"Could not save customer {snapshot.identifier}") from exc
        except BotoCoreError as exc:
            logger.error(
                "Snapshot save failed",
                extra={"identifier": snapshot.identifier, "error": str(exc)},
            )
            raise StorageError(f"Could not save customer {snapshot.identifier}") from exc
        return stored
