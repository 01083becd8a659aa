"""Parse the flat ``info.ini`` metadata file shipped with every mod.

The format has no sections: one ``key = value`` assignment per line, ``#`` and ``;``
start comment lines. Each physical line stands alone; there is no continuation syntax.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

# info.ini key -> ModMetadata field
REQUIRED_KEYS = {
    "name": "name",
    "displayName": "display_name",
    "description": "description",
}
OPTIONAL_KEYS = {
    "publishedFileId": "published_file_id",
    "version": "version",
    "tags": "tags",
    "authors": "authors",
    "license": "license",
    "homepage": "homepage",
}
COMMENT_PREFIXES = ("#", ";")

LINE_BREAK = re.compile(r"\r?\n")
ASSIGNMENT = re.compile(r"^([^=]+?)\s*=\s*(.*)$")


@dataclass(frozen=True)
class ModMetadata:
    name: str
    display_name: str
    description: str
    published_file_id: str | None = None
    version: str | None = None
    tags: str | None = None
    authors: str | None = None
    license: str | None = None
    homepage: str | None = None


@dataclass(frozen=True)
class ParseResult:
    success: bool
    metadata: ModMetadata | None = None
    error: str | None = None


def read_assignments(content: str) -> dict[str, str]:
    """Collect ``key = value`` pairs; later keys overwrite earlier ones."""
    values: dict[str, str] = {}
    for line in LINE_BREAK.split(content):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIXES):
            continue
        match = ASSIGNMENT.match(stripped)
        if match:
            key, value = match.groups()
            values[key.strip()] = value.strip()
    return values


def to_metadata(values: dict[str, str]) -> ParseResult:
    missing = [key for key in REQUIRED_KEYS if not values.get(key)]
    if missing:
        return ParseResult(success=False, error=f"Missing required fields: {', '.join(missing)}")

    fields = {field: values[key] for key, field in REQUIRED_KEYS.items()}
    # Empty optional values count as absent, same as for required keys.
    fields.update({field: values.get(key) or None for key, field in OPTIONAL_KEYS.items()})
    return ParseResult(success=True, metadata=ModMetadata(**fields))


def parse_info_ini(content: str) -> ParseResult:
    # A leading byte-order mark is not part of the first key.
    return to_metadata(read_assignments(content.lstrip("\ufeff")))


def read_info_ini(path: Path) -> ParseResult:
    """Read and parse ``path``. A missing file is a parse failure; other I/O errors propagate."""
    try:
        content = Path(path).read_text(encoding="utf-8-sig", errors="replace")
    except FileNotFoundError:
        return ParseResult(success=False, error=f"info.ini not found at: {path}")
    return parse_info_ini(content)
