#!/usr/bin/env -S uv run --script
# /// script
# requires-python = ">=3.11"
# dependencies = []
# ///
"""Validate a mod's info.ini, pack the mod folder as a .nupkg and publish it to a NuGet feed."""

from __future__ import annotations

import argparse
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from gh_actions import error, get_input, input_flag, log, mask, set_outputs
from info_ini import ModMetadata, read_info_ini
from mod_validation import validate_metadata
from nuget_cli import pack_nupkg, push_nupkg, require_dotnet
from nuspec import DEFAULTS, generate_nuspec, has_preview_image

DEFAULT_SERVER = "https://api.nuget.org/v3/index.json"
INFO_INI = "info.ini"
STAGING_DIR = ".nuget-temp"
MOD_COPY_DIR = "mod-copy"


@dataclass(frozen=True)
class ActionInputs:
    mod_folder_path: str
    nuget_server: str = DEFAULT_SERVER
    nuget_api_key: str = ""
    push: bool = True


@dataclass(frozen=True)
class PipelineOutcome:
    success: bool
    error: str | None = None
    package_path: Path | None = None
    version: str | None = None

    def outputs(self) -> dict[str, str]:
        values = {"success": "true" if self.success else "false"}
        if self.error:
            values["error"] = self.error
        if self.package_path:
            values["package_path"] = str(self.package_path)
        if self.version:
            values["version"] = self.version
        return values


def stage_mod(mod_folder: Path, workspace: Path, metadata: ModMetadata, nuspec_xml: str) -> Path:
    """Copy the mod into a fresh staging folder next to its .nuspec and return that folder."""
    staging = workspace / STAGING_DIR
    if staging.exists():
        shutil.rmtree(staging)
    mod_copy = staging / MOD_COPY_DIR
    shutil.copytree(mod_folder, mod_copy, ignore=shutil.ignore_patterns(STAGING_DIR))
    (mod_copy / f"{metadata.name}.nuspec").write_text(nuspec_xml, encoding="utf-8")
    return mod_copy


def package_and_publish(
    inputs: ActionInputs, workspace: Path, mod_folder: Path, metadata: ModMetadata, version: str
) -> PipelineOutcome:
    require_dotnet()

    log("Step 3: Generating .nuspec file...")
    has_preview = has_preview_image(mod_folder)
    log(f"  - Has preview.png: {has_preview}")
    nuspec_xml = generate_nuspec(metadata, has_preview)
    mod_copy = stage_mod(mod_folder, workspace, metadata, nuspec_xml)
    log(f"  - Mod files staged in: {mod_copy}")

    log("Step 4: Creating NuGet package...")
    packed = pack_nupkg(f"{metadata.name}.nuspec", mod_copy)
    if not packed.success or packed.package_path is None:
        return PipelineOutcome(success=False, error=f"Packaging failed: {packed.error}", version=version)
    package_path = packed.package_path
    log(f"  - Package created: {package_path}")

    if not inputs.push:
        log("Pack-only mode: package generated but not published")
        return PipelineOutcome(success=True, package_path=package_path, version=version)

    log("Step 5: Publishing to NuGet server...")
    pushed = push_nupkg(package_path, inputs.nuget_server, inputs.nuget_api_key or None, mod_copy)
    if not pushed.success:
        return PipelineOutcome(
            success=False, error=f"Publishing failed: {pushed.error}", package_path=package_path, version=version
        )
    log("  - Package published successfully!")
    return PipelineOutcome(success=True, package_path=package_path, version=version)


def run_pipeline(inputs: ActionInputs, workspace: Path) -> PipelineOutcome:
    if not inputs.mod_folder_path:
        return PipelineOutcome(success=False, error="Input required and not supplied: mod_folder_path")

    mod_folder = (workspace / inputs.mod_folder_path).resolve()
    log(f"Mod folder path: {mod_folder}")
    log(f"NuGet server: {inputs.nuget_server}")
    if inputs.nuget_api_key:
        log("Authentication: API key provided")
    else:
        log("Authentication: Trusted Publisher/OIDC (no API key)")

    if not mod_folder.is_dir():
        return PipelineOutcome(success=False, error=f"Mod folder not found: {mod_folder}")

    log("Step 1: Parsing info.ini...")
    parsed = read_info_ini(mod_folder / INFO_INI)
    if not parsed.success or parsed.metadata is None:
        return PipelineOutcome(success=False, error=f"Failed to parse info.ini: {parsed.error}")
    metadata = parsed.metadata
    version = metadata.version or DEFAULTS.version
    log(f"  - name: {metadata.name}")
    log(f"  - displayName: {metadata.display_name}")
    log(f"  - version: {metadata.version or f'{DEFAULTS.version} (default)'}")

    log("Step 2: Validating metadata...")
    validation = validate_metadata(metadata, mod_folder)
    if not validation.success:
        details = "\n".join(f"  - {msg}" for msg in validation.errors)
        return PipelineOutcome(success=False, error=f"Validation failed:\n{details}", version=version)
    log("  - Validation passed")

    # From here on every failure still reports the resolved version.
    try:
        return package_and_publish(inputs, workspace, mod_folder, metadata, version)
    except Exception as exc:
        return PipelineOutcome(success=False, error=str(exc) or type(exc).__name__, version=version)


def parse_args(argv: list[str] | None = None) -> ActionInputs:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--mod-folder-path",
        default=get_input("mod_folder_path"),
        help="Mod folder, relative to GITHUB_WORKSPACE unless absolute.",
    )
    parser.add_argument("--nuget-server", default=get_input("nuget_server", DEFAULT_SERVER))
    parser.add_argument(
        "--nuget-api-key",
        default=get_input("nuget_api_key"),
        help="Feed API key. Leave empty to use trusted publishing.",
    )
    parser.add_argument(
        "--push",
        action=argparse.BooleanOptionalAction,
        default=input_flag("push", True),
        help="Publish after packing (default: true).",
    )
    args = parser.parse_args(argv)

    return ActionInputs(
        mod_folder_path=(args.mod_folder_path or "").strip(),
        nuget_server=args.nuget_server or DEFAULT_SERVER,
        nuget_api_key=args.nuget_api_key or "",
        push=args.push,
    )


def report(outcome: PipelineOutcome) -> int:
    set_outputs(outcome.outputs())
    if not outcome.success:
        error(outcome.error or "Unknown error")
        return 1

    log("=" * 40)
    log("Action completed successfully!")
    log(f"Package: {outcome.package_path}")
    log(f"Version: {outcome.version}")
    log("=" * 40)
    return 0


def main(argv: list[str] | None = None) -> int:
    inputs = parse_args(argv)
    mask(inputs.nuget_api_key)
    workspace = Path(os.environ.get("GITHUB_WORKSPACE") or Path.cwd())

    try:
        outcome = run_pipeline(inputs, workspace)
    except Exception as exc:
        outcome = PipelineOutcome(success=False, error=str(exc) or type(exc).__name__)
    return report(outcome)


if __name__ == "__main__":
    raise SystemExit(main())
