from ragtime.dbs.interfaces.metadata_store import AbstractDocumentMetadataStore
from ragtime.dbs.interfaces.secondary_source import SecondaryDataSource

__all__ = ["AbstractDocumentMetadataStore", "SecondaryDataSource"]
