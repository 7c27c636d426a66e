"""Indexer for the ScotAccount technical documentation pages."""

import logging
from collections.abc import Sequence
from pathlib import Path

from sg_techdocs_search.models import DocumentRecord, ManifestEntry
from sg_techdocs_search.parser import DocumentParser

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST: tuple[ManifestEntry, ...] = (
    ManifestEntry("index.md", "/", "Home"),
    ManifestEntry("getting-started.md", "/getting-started/", "Getting Started"),
    ManifestEntry("architecture.md", "/architecture/", "Architecture"),
    ManifestEntry("scotaccount-guide.md", "/scotaccount-guide/", "Implementation Guide"),
    ManifestEntry("scotaccount-complete-guide.md", "/scotaccount-complete-guide/", "Comprehensive Guide"),
    ManifestEntry(
        "scotaccount-token-validation-module.md",
        "/scotaccount-token-validation-module/",
        "Token Validation Module",
    ),
    ManifestEntry("integration-examples.md", "/integration-examples/", "Integration Examples"),
    ManifestEntry("scotaccount-modular-structure.md", "/scotaccount-modular-structure/", "Modular Structure"),
)


def prefix_url(url: str, path_prefix: str) -> str:
    """Prepend the deployment path prefix to a site-relative URL.

    Args:
        url: Site-relative URL starting with a slash.
        path_prefix: Base path the site is served from.

    Returns:
        The URL unchanged for a root deployment, otherwise prefixed.
    """
    if not path_prefix or path_prefix == "/":
        return url
    return path_prefix.rstrip("/") + url


def discover_manifest(content_dir: Path) -> list[ManifestEntry]:
    """Build a manifest from the Markdown files at the top of a directory.

    Args:
        content_dir: Directory holding the pages.

    Returns:
        Manifest entries sorted by file name, index.md first.

    Raises:
        ValueError: If the directory does not exist.
    """
    if not content_dir.is_dir():
        msg = f"Content directory does not exist: {content_dir}"
        raise ValueError(msg)

    entries = []
    for file_path in sorted(content_dir.glob("*.md"), key=lambda p: (p.stem != "index", p.name)):
        if file_path.stem == "index":
            entries.append(ManifestEntry(file_path.name, "/", "Home"))
        else:
            title = file_path.stem.replace("-", " ").replace("_", " ").title()
            entries.append(ManifestEntry(file_path.name, f"/{file_path.stem}/", title))
    return entries


class SearchIndexBuilder:
    """Builds document records from a manifest of Markdown pages."""

    def __init__(
        self,
        manifest: Sequence[ManifestEntry] = DEFAULT_MANIFEST,
        path_prefix: str = "/",
        parser: DocumentParser | None = None,
    ) -> None:
        """Initialise builder.

        Args:
            manifest: Ordered pages to index.
            path_prefix: Base path the site is served from.
            parser: Parser used for each page.
        """
        self.manifest = tuple(manifest)
        self.path_prefix = path_prefix
        self.parser = parser or DocumentParser()

    def index_from_path(self, content_dir: Path) -> list[DocumentRecord]:
        """Index every manifest page found under a directory.

        Pages that cannot be read are logged and skipped, as are pages
        whose URL is already taken.

        Args:
            content_dir: Directory holding the pages.

        Returns:
            Records in manifest order.
        """
        records: list[DocumentRecord] = []
        seen_urls: set[str] = set()

        logger.info("Indexing %d pages from %s", len(self.manifest), content_dir)

        for entry in self.manifest:
            url = prefix_url(entry.url, self.path_prefix)
            if url in seen_urls:
                logger.warning("Skipping %s: URL %s already indexed", entry.file, url)
                continue

            file_path = content_dir / entry.file
            if not file_path.is_file():
                logger.warning("Skipping %s: file not found", file_path)
                continue

            record = self.parser.parse_file(file_path, entry, url)
            if record is None:
                logger.warning("Failed to parse: %s", file_path)
                continue

            seen_urls.add(url)
            records.append(record)
            logger.debug("Indexed: %s", url)

        logger.info("Successfully indexed %d documents", len(records))
        return records
