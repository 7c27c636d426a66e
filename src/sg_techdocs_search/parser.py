"""Parser for the Markdown pages of the technical documentation site."""

import logging
import re
import unicodedata
from pathlib import Path
from typing import Any

import yaml

from sg_techdocs_search.models import DocumentRecord, ManifestEntry, Section

logger = logging.getLogger(__name__)

FRONT_MATTER_PATTERN = re.compile(r"^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)", re.DOTALL)
FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")
KEYWORD_HEADING_PATTERN = re.compile(r"^#{1,3}\s+(.+)$")
SECTION_HEADING_PATTERN = re.compile(r"^(#{2,4})\s+(.+?)(?:\s+#+)?\s*$")

# Applied in order; each pair is (pattern, replacement)
_CLEANING_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"`[^`]+`"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"[#*_~]"), ""),
    (re.compile(r"\[\[toc\]\]", re.IGNORECASE), ""),
    (re.compile(r"<!--[\s\S]*?-->"), ""),
    (re.compile(r"<[^>]+>"), ""),
    (re.compile(r"\n{3,}"), "\n\n"),
)

ELLIPSIS = "..."


def parse_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split a page into its YAML front matter and Markdown body.

    Args:
        source: Full file contents.

    Returns:
        Tuple of (metadata, body). Pages without front matter, or whose
        front matter is not a valid YAML mapping, yield an empty dict and
        the original source. A leading byte order mark is dropped.
    """
    source = source.removeprefix("\ufeff")
    match = FRONT_MATTER_PATTERN.match(source)
    if not match:
        return {}, source

    try:
        metadata = yaml.safe_load(match.group(1) or "") or {}
    except yaml.YAMLError:
        logger.debug("Ignoring malformed front matter")
        return {}, source

    if not isinstance(metadata, dict):
        return {}, source

    return metadata, source[match.end() :]


def clean_content(content: str) -> str:
    """Reduce Markdown to lowercase plain text for matching.

    Code blocks and inline code are dropped, links keep their text, and
    formatting markers, TOC markers and HTML are stripped.

    Args:
        content: Markdown text.

    Returns:
        Normalized searchable text.
    """
    for pattern, replacement in _CLEANING_RULES:
        content = pattern.sub(replacement, content)
    return content.strip().lower()


def slugify(text: str) -> str:
    """Derive the anchor id the site generates for a heading.

    Args:
        text: Heading text.

    Returns:
        Lowercase hyphenated slug.
    """
    slug = unicodedata.normalize("NFKD", str(text).lower())
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def summarize(content: str, length: int = 200) -> str:
    """Return the leading characters of content, marking truncation."""
    if len(content) <= length:
        return content
    return content[:length] + ELLIPSIS


def _outside_fences(body: str) -> list[tuple[bool, str]]:
    """Pair each body line with whether it sits outside a fenced code block."""
    lines: list[tuple[bool, str]] = []
    fence: str | None = None
    for line in body.splitlines():
        match = FENCE_PATTERN.match(line)
        if match:
            marker = match.group(1)
            if fence is None:
                fence = marker
            elif fence == marker:
                fence = None
            lines.append((False, line))
            continue
        lines.append((fence is None, line))
    return lines


def extract_keywords(body: str) -> str:
    """Join the level 1-3 heading texts of a page.

    Args:
        body: Markdown body without front matter.

    Returns:
        Lowercased heading texts separated by single spaces.
    """
    headings = []
    for visible, line in _outside_fences(body):
        if not visible:
            continue
        match = KEYWORD_HEADING_PATTERN.match(line)
        if match:
            headings.append(match.group(1).strip().lower())
    return " ".join(headings)


def extract_sections(body: str) -> tuple[Section, ...]:
    """Split a page into its level 2-4 headed sections.

    Text before the first such heading belongs to no section. Repeated
    slugs are numbered the way the site's anchor plugin does it.

    Args:
        body: Markdown body without front matter.

    Returns:
        Sections in document order.
    """
    sections: list[Section] = []
    seen: set[str] = set()
    heading: str | None = None
    buffer: list[str] = []

    def flush() -> None:
        if heading is None:
            return
        base = slugify(heading) or "section"
        slug = base
        counter = 1
        while slug in seen:
            slug = f"{base}-{counter}"
            counter += 1
        seen.add(slug)
        sections.append(Section(heading=heading, id=slug, content=clean_content("\n".join(buffer))))

    for visible, line in _outside_fences(body):
        match = SECTION_HEADING_PATTERN.match(line) if visible else None
        if match:
            flush()
            heading = match.group(2).strip()
            buffer = []
        else:
            buffer.append(line)
    flush()

    return tuple(sections)


class DocumentParser:
    """Parses Markdown pages into searchable document records."""

    def __init__(self, summary_length: int = 200) -> None:
        """Initialise parser.

        Args:
            summary_length: Number of content characters kept as summary.
        """
        self.summary_length = summary_length

    def parse_file(self, file_path: Path, entry: ManifestEntry, url: str) -> DocumentRecord | None:
        """Read and parse a Markdown page.

        Args:
            file_path: Path to the Markdown file.
            entry: Manifest entry describing the page.
            url: Resolved, path-prefixed URL of the page.

        Returns:
            DocumentRecord instance or None if the file cannot be read.
        """
        try:
            source = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s: %s", file_path, exc)
            return None
        return self.parse_source(source, entry, url)

    def parse_source(self, source: str, entry: ManifestEntry, url: str) -> DocumentRecord:
        """Parse Markdown source into a record.

        Args:
            source: File contents including optional front matter.
            entry: Manifest entry describing the page.
            url: Resolved, path-prefixed URL of the page.

        Returns:
            DocumentRecord instance.
        """
        metadata, body = parse_front_matter(source)
        title = metadata.get("title") or entry.title
        content = clean_content(body)

        return DocumentRecord(
            title=str(title),
            url=url,
            content=content,
            summary=summarize(content, self.summary_length),
            keywords=extract_keywords(body),
            sections=extract_sections(body),
        )
