"""Data models for the documentation search index."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class ManifestEntry:
    """A content file, its site-relative URL and its default title."""

    file: str
    url: str
    title: str


@dataclass(frozen=True)
class Section:
    """A level 2-4 heading of a page and the text beneath it."""

    heading: str
    id: str
    content: str


@dataclass(frozen=True)
class DocumentRecord:
    """Represents one searchable documentation page."""

    title: str
    url: str
    content: str
    summary: str
    keywords: str
    sections: tuple[Section, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Return the serialized form of the record.

        Returns:
            Mapping with the record fields and sections as plain mappings.
        """
        return {
            "title": self.title,
            "url": self.url,
            "content": self.content,
            "summary": self.summary,
            "keywords": self.keywords,
            "sections": [
                {"heading": section.heading, "id": section.id, "content": section.content}
                for section in self.sections
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentRecord":
        """Build a record from its serialized form.

        Args:
            data: Mapping as produced by to_dict.

        Returns:
            DocumentRecord instance.

        Raises:
            KeyError: If a required field is missing.
        """
        return cls(
            title=str(data["title"]),
            url=str(data["url"]),
            content=str(data["content"]),
            summary=str(data.get("summary", "")),
            keywords=str(data.get("keywords", "")),
            sections=tuple(
                Section(heading=str(item["heading"]), id=str(item["id"]), content=str(item["content"]))
                for item in data.get("sections") or ()
            ),
        )


@dataclass(frozen=True)
class SearchResult:
    """Represents a search result."""

    record: DocumentRecord
    score: float
    matched_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class RenderedResult:
    """Displayable fields of a single search result."""

    title: str
    url: str
    display_summary: str


@dataclass
class SearchPayload:
    """What the results panel shows for a query."""

    query: str
    count: int
    header: str | None = None
    message: str | None = None
    results: list[RenderedResult] = field(default_factory=list)
    suggestions: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "count": self.count,
            "header": self.header,
            "message": self.message,
            "results": [
                {"title": item.title, "url": item.url, "summary": item.display_summary} for item in self.results
            ],
            "suggestions": list(self.suggestions),
        }


class EngineState(Enum):
    """Lifecycle of a QueryEngine."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"
