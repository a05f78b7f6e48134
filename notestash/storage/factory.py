"""Build an ObjectStore from configuration."""

from __future__ import annotations

from notestash.config import Backend, NotestashConfig, objects_dir
from notestash.storage.base import ObjectStore
from notestash.storage.local import LocalObjectStore
from notestash.storage.memory import InMemoryObjectStore


def create_store(config: NotestashConfig) -> ObjectStore:
    if config.backend == Backend.MEMORY:
        return InMemoryObjectStore()
    if config.backend == Backend.GCS:
        from google.cloud import storage

        from notestash.storage.gcs import GcsObjectStore

        return GcsObjectStore(storage.Client(project=config.gcs_project), config.retry)
    return LocalObjectStore(objects_dir(config))
