"""JSON codec for record collections.

Every collection is one JSON array of camelCase objects. Decoding validates
each element against the collection's record type.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from tess_backoffice.models import Employee, Product, ProductionRecord, SalaryRecord, Sale, User
from tess_backoffice.store.types import Collection, StorageError

logger = logging.getLogger(__name__)

COLLECTION_MODELS: dict[Collection, type] = {
    Collection.INVENTORY: Product,
    Collection.SALES: Sale,
    Collection.USERS: User,
    Collection.EMPLOYEES: Employee,
    Collection.PRODUCTION_RECORDS: ProductionRecord,
    Collection.SALARY_RECORDS: SalaryRecord,
}

_ADAPTERS: dict[Collection, TypeAdapter[Any]] = {
    collection: TypeAdapter(list[model]) for collection, model in COLLECTION_MODELS.items()
}


def encode_collection(collection: Collection, items: list[Any]) -> str:
    """Serialize records to the stored JSON array."""
    try:
        return _ADAPTERS[collection].dump_json(list(items), by_alias=True).decode()
    except (PydanticSerializationError, ValidationError, TypeError) as exc:
        logger.exception("Error serializing items for %s", collection.value)
        raise StorageError(collection, "serialize", str(exc)) from exc


def decode_collection(collection: Collection, payload: str | None) -> list[Any]:
    """Parse and validate a stored JSON array. Missing payloads are empty."""
    if not payload:
        return []
    try:
        return _ADAPTERS[collection].validate_json(payload)
    except ValidationError as exc:
        logger.exception("Error reading items from %s", collection.value)
        raise StorageError(collection, "deserialize", str(exc)) from exc
