"""Record store: named JSON collections behind a swappable backend."""

from tess_backoffice.store.base import RecordStore
from tess_backoffice.store.codec import COLLECTION_MODELS, decode_collection, encode_collection
from tess_backoffice.store.events import ChangeNotifier, CollectionChanged
from tess_backoffice.store.memory import InMemoryRecordStore
from tess_backoffice.store.sql import SqlRecordStore
from tess_backoffice.store.types import Collection, ConcurrentWriteError, Snapshot, StorageError

__all__ = [
    "COLLECTION_MODELS",
    "ChangeNotifier",
    "Collection",
    "CollectionChanged",
    "ConcurrentWriteError",
    "InMemoryRecordStore",
    "RecordStore",
    "Snapshot",
    "SqlRecordStore",
    "StorageError",
    "decode_collection",
    "encode_collection",
]
