"""Render the .nuspec manifest for a mod package."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from xml.sax.saxutils import escape

from info_ini import ModMetadata

PREVIEW_IMAGE = "preview.png"
ICON_FILE = "icon.png"


@dataclass(frozen=True)
class NuspecDefaults:
    version: str = "1.0.0"
    authors: str = "Unknown"
    # Added in front of the mod's own tags on every package.
    tags: tuple[str, ...] = ("duckymod", "game-mod")
    namespace: str = "http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd"


DEFAULTS = NuspecDefaults()


def escape_xml(text: str) -> str:
    # escape() handles & first, so nothing is escaped twice.
    return escape(text, {'"': "&quot;", "'": "&apos;"})


def split_tags(tags: str | None) -> list[str]:
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def generate_nuspec(metadata: ModMetadata, has_preview: bool, defaults: NuspecDefaults = DEFAULTS) -> str:
    """Build the manifest XML. Pure and deterministic for a given input."""
    version = metadata.version or defaults.version
    authors = metadata.authors or defaults.authors
    tags = " ".join([*defaults.tags, *split_tags(metadata.tags)])

    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        f'<package xmlns="{defaults.namespace}">',
        "  <metadata>",
        f"    <id>{escape_xml(metadata.name)}</id>",
        f"    <version>{escape_xml(version)}</version>",
        f"    <title>{escape_xml(metadata.display_name)}</title>",
        f"    <description>{escape_xml(metadata.description)}</description>",
        f"    <authors>{escape_xml(authors)}</authors>",
        "    <developmentDependency>false</developmentDependency>",
        "    <frameworkAssemblies>",
        '      <frameworkAssembly assemblyName="netstandard" targetFramework=".NETStandard2.1" />',
        "    </frameworkAssemblies>",
    ]
    if tags:
        lines.append(f"    <tags>{escape_xml(tags)}</tags>")
    if has_preview:
        lines.append(f"    <icon>{ICON_FILE}</icon>")
    if metadata.license:
        lines.append(f'    <license type="expression">{escape_xml(metadata.license)}</license>')
    if metadata.homepage:
        lines.append(f"    <projectUrl>{escape_xml(metadata.homepage)}</projectUrl>")
    lines += ["  </metadata>", "  <files>"]
    if has_preview:
        lines.append(f'    <file src="{PREVIEW_IMAGE}" target="{ICON_FILE}" />')
    # Everything else goes under content\, minus the preview that became the icon.
    lines.append(f'    <file src="**" target="content\\" exclude="{PREVIEW_IMAGE}" />')
    lines += ["  </files>", "</package>"]
    return "\n".join(lines)


def is_readable_file(path: Path) -> bool:
    """Any access problem, not only a missing file, counts as unreadable."""
    try:
        return path.is_file() and os.access(path, os.R_OK)
    except OSError:
        return False


def has_preview_image(mod_folder: Path) -> bool:
    return is_readable_file(Path(mod_folder) / PREVIEW_IMAGE)
