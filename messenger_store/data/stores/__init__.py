"""
Document store backends
"""
from .base import DocumentStore, Transaction
from .memory import MemoryDocumentStore

__all__ = [
    "DocumentStore",
    "Transaction",
    "MemoryDocumentStore",
    "create_document_store",
]


def create_document_store(config=None) -> DocumentStore:
    """Build the configured backend"""
    from messenger_store.configs.database_config import database_config

    config = config or database_config
    if config.backend == "memory":
        return MemoryDocumentStore()
    if config.backend == "postgres":
        from messenger_store.data.database import DatabaseManager
        from .postgres import PostgresDocumentStore

        return PostgresDocumentStore(DatabaseManager(config))
    raise ValueError(f"Unknown document backend: {config.backend}")
