"""Validate parsed mod metadata against NuGet naming, SemVer and the mod's DLL."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from info_ini import ModMetadata

NUGET_ID = re.compile(r"[A-Za-z_][A-Za-z0-9._-]*")

# SemVer 2.0.0: major.minor.patch[-prerelease][+build]
_NUMERIC = r"0|[1-9][0-9]*"
_PRERELEASE_ID = r"0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*"
SEMVER = re.compile(
    rf"({_NUMERIC})\.({_NUMERIC})\.({_NUMERIC})"
    rf"(?:-((?:{_PRERELEASE_ID})(?:\.(?:{_PRERELEASE_ID}))*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
)

DLL_SUFFIX = ".dll"


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


def is_valid_nuget_id(package_id: str) -> bool:
    return NUGET_ID.fullmatch(package_id) is not None


def is_valid_semver(version: str) -> bool:
    return SEMVER.fullmatch(version) is not None


def validate_dll_name(mod_folder: Path, name: str) -> ValidationResult:
    """Require a DLL in ``mod_folder`` whose base name is exactly ``name``."""
    result = ValidationResult()
    try:
        entries = os.listdir(mod_folder)
    except OSError as exc:
        result.errors.append(f"Failed to read mod folder: {exc}")
        return result

    dll_files = [entry for entry in entries if entry.lower().endswith(DLL_SUFFIX)]
    if not dll_files:
        result.errors.append(f"No DLL file found in mod folder: {mod_folder}")
        return result

    if not any(dll[: -len(DLL_SUFFIX)] == name for dll in dll_files):
        result.errors.append(
            f"The 'name' field ({name}) does not match any DLL filename. "
            f"Expected: {name}{DLL_SUFFIX}. Found: {', '.join(dll_files)}"
        )
    return result


def validate_metadata(metadata: ModMetadata, mod_folder: Path) -> ValidationResult:
    result = ValidationResult()

    if not is_valid_nuget_id(metadata.name):
        result.errors.append(
            f"The 'name' field ({metadata.name}) is not a valid NuGet ID. "
            "Must start with a letter or underscore and contain only alphanumeric characters, "
            "dots, underscores, and hyphens."
        )

    if metadata.version is not None and not is_valid_semver(metadata.version):
        result.errors.append(
            f"The 'version' field ({metadata.version}) is not valid SemVer 2.0.0. "
            "Expected format: major.minor.patch (e.g., 1.0.0, 2.3.4-beta, 1.0.0-rc.1+build.123)"
        )

    result.errors.extend(validate_dll_name(mod_folder, metadata.name).errors)
    return result
