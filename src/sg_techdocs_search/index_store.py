"""JSON persistence for the serialized search index."""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from sg_techdocs_search.models import DocumentRecord

logger = logging.getLogger(__name__)


class IndexStoreError(ValueError):
    """Raised when a serialized index cannot be decoded."""


class IndexStore:
    """Reads and writes the index as a ``{"pages": [...]}`` JSON document."""

    def __init__(self, index_path: Path) -> None:
        """Initialise store with the given path.

        Args:
            index_path: Path to the JSON index file.
        """
        self.index_path = index_path

    def save(self, records: Iterable[DocumentRecord]) -> int:
        """Write records to the index file.

        Args:
            records: Records to serialize.

        Returns:
            Number of records written.
        """
        pages = [record.to_dict() for record in records]
        self.index_path.parent.mkdir(parents=True, exist_ok=True)
        self.index_path.write_text(json.dumps({"pages": pages}, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Wrote %d records to %s", len(pages), self.index_path)
        return len(pages)

    def load(self) -> list[DocumentRecord]:
        """Read records from the index file.

        Returns:
            Records in stored order.

        Raises:
            OSError: If the file cannot be read.
            IndexStoreError: If the contents are not a valid index.
        """
        raw = self.index_path.read_text(encoding="utf-8")
        return self.loads(raw)

    @staticmethod
    def loads(raw: str) -> list[DocumentRecord]:
        """Decode records from serialized index text.

        Args:
            raw: JSON text.

        Returns:
            Decoded records.

        Raises:
            IndexStoreError: If the text is not a valid index.
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Index is not valid JSON: {exc}"
            raise IndexStoreError(msg) from exc

        pages = data.get("pages") if isinstance(data, dict) else None
        if not isinstance(pages, list):
            msg = "Index must be an object with a 'pages' list"
            raise IndexStoreError(msg)

        records = []
        for position, page in enumerate(pages):
            if not isinstance(page, dict):
                msg = f"Index entry {position} is not an object"
                raise IndexStoreError(msg)
            try:
                records.append(DocumentRecord.from_dict(page))
            except (KeyError, TypeError) as exc:
                msg = f"Index entry {position} is missing field {exc}"
                raise IndexStoreError(msg) from exc
        return records
