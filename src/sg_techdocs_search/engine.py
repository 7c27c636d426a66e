"""Query engine answering fuzzy searches over a prebuilt index."""

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from sg_techdocs_search.config import SearchSettings
from sg_techdocs_search.fuzzy import FuzzyIndex
from sg_techdocs_search.index_store import IndexStore
from sg_techdocs_search.models import DocumentRecord, EngineState, RenderedResult, SearchPayload, SearchResult
from sg_techdocs_search.parser import ELLIPSIS

logger = logging.getLogger(__name__)

SUGGESTED_QUERIES = ("authentication", "token validation", "PKCE", "JWKS")

PayloadHandler = Callable[[SearchPayload | None], None]


class QueryEngine:
    """Holds the loaded index and answers queries against it.

    The engine is loaded once through init() and is read-only afterwards.
    A failed load leaves it UNAVAILABLE, in which case every search comes
    back empty and subscribers are told to hide the results panel.
    """

    def __init__(self, settings: SearchSettings | None = None) -> None:
        """Initialise an engine with nothing loaded.

        Args:
            settings: Matching and display settings.
        """
        self.settings = settings or SearchSettings()
        self._state = EngineState.UNINITIALIZED
        self._index: FuzzyIndex | None = None
        self._query_handlers: list[PayloadHandler] = []
        self._submit_handlers: list[PayloadHandler] = []

    @property
    def state(self) -> EngineState:
        return self._state

    def ready(self) -> bool:
        """Return whether the engine accepts queries."""
        return self._state is EngineState.READY

    def init(self, source: str | os.PathLike[str] | Iterable[DocumentRecord]) -> EngineState:
        """Load the index and build the fuzzy matcher.

        Args:
            source: Path to a serialized index, or the records themselves.

        Returns:
            The resulting state, READY or UNAVAILABLE.

        Raises:
            RuntimeError: If the engine was already initialised.
        """
        if self._state is not EngineState.UNINITIALIZED:
            msg = f"Engine already initialised (state: {self._state.value})"
            raise RuntimeError(msg)

        self._state = EngineState.LOADING
        try:
            if isinstance(source, (str, os.PathLike)):
                records = IndexStore(Path(source)).load()
            else:
                records = list(source)
            for record in records:
                if not isinstance(record, DocumentRecord):
                    msg = f"Expected DocumentRecord, got {type(record).__name__}"
                    raise TypeError(msg)
            self._index = FuzzyIndex(
                records,
                fields=self.settings.field_weights(),
                threshold=self.settings.threshold,
            )
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Search index unavailable: %s", exc)
            self._state = EngineState.UNAVAILABLE
            return self._state

        self._state = EngineState.READY
        logger.info("Search ready with %d documents", len(self._index))
        return self._state

    def search(self, query: str) -> list[SearchResult]:
        """Find records matching a query.

        Args:
            query: Raw user input.

        Returns:
            Results by ascending score. Empty when the engine is not ready
            or the query is shorter than the minimum length.
        """
        if self._index is None or not self.ready():
            return []
        if len(query) < self.settings.min_query_length:
            return []
        return self._index.search(query)

    def display_summary(self, record: DocumentRecord, query: str) -> str:
        """Return the part of a record's content around the query.

        Args:
            record: Matched record.
            query: Raw user input.

        Returns:
            A padded window around the first occurrence of the query, or the
            start of the content when the query does not occur verbatim.
        """
        content = record.content
        needle = query.lower()
        position = content.lower().find(needle)
        if position == -1:
            return content[: self.settings.fallback_summary_length] + ELLIPSIS

        padding = self.settings.snippet_padding
        start = max(0, position - padding)
        end = min(len(content), position + len(needle) + padding)

        window = content[start:end]
        if start > 0:
            window = ELLIPSIS + window
        if end < len(content):
            window = window + ELLIPSIS
        return window

    def render(self, results: list[SearchResult], query: str) -> SearchPayload:
        """Build the results panel contents for a query.

        Args:
            results: Ranked results from search().
            query: Raw user input.

        Returns:
            Payload with either a results header and entries, or a no-results
            message with suggested queries.
        """
        if not results:
            return SearchPayload(
                query=query,
                count=0,
                message=f'No results found for "{query}"',
                suggestions=SUGGESTED_QUERIES,
            )

        count = len(results)
        noun = "result" if count == 1 else "results"
        return SearchPayload(
            query=query,
            count=count,
            header=f'{count} {noun} for "{query}"',
            results=[
                RenderedResult(
                    title=result.record.title,
                    url=result.record.url,
                    display_summary=self.display_summary(result.record, query),
                )
                for result in results
            ],
        )

    def on_query_change(self, handler: PayloadHandler) -> None:
        """Subscribe to payloads produced while the user types."""
        self._query_handlers.append(handler)

    def on_submit(self, handler: PayloadHandler) -> None:
        """Subscribe to payloads produced on form submission."""
        self._submit_handlers.append(handler)

    def query_changed(self, text: str) -> SearchPayload | None:
        """Handle a change of the search input."""
        return self._dispatch(self._query_handlers, text)

    def submit(self, text: str) -> SearchPayload | None:
        """Handle submission of the search form."""
        return self._dispatch(self._submit_handlers, text)

    def _dispatch(self, handlers: list[PayloadHandler], text: str) -> SearchPayload | None:
        payload = None
        if self.ready() and len(text) >= self.settings.min_query_length:
            payload = self.render(self.search(text), text)
        for handler in handlers:
            handler(payload)
        return payload
