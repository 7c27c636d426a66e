"""Search index builder and query engine for the ScotAccount technical documentation."""

from sg_techdocs_search.config import SearchSettings
from sg_techdocs_search.engine import QueryEngine
from sg_techdocs_search.index_store import IndexStore, IndexStoreError
from sg_techdocs_search.indexer import DEFAULT_MANIFEST, SearchIndexBuilder
from sg_techdocs_search.models import DocumentRecord, EngineState, ManifestEntry, SearchPayload, SearchResult, Section

__all__ = [
    "DEFAULT_MANIFEST",
    "DocumentRecord",
    "EngineState",
    "IndexStore",
    "IndexStoreError",
    "ManifestEntry",
    "QueryEngine",
    "SearchIndexBuilder",
    "SearchPayload",
    "SearchResult",
    "SearchSettings",
    "Section",
]
