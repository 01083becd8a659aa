"""Pack and push .nupkg files with the ``dotnet nuget`` CLI."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from gh_actions import log, mask

COMMAND_TIMEOUT = 300
CREATED_PACKAGE = re.compile(r"Successfully created package '(.+?)'")


class DotnetNotFoundError(RuntimeError):
    pass


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        return self.stderr or self.stdout


@dataclass(frozen=True)
class PackResult:
    success: bool
    package_path: Path | None = None
    error: str | None = None


@dataclass(frozen=True)
class PushResult:
    success: bool
    error: str | None = None


def require_dotnet() -> str:
    """Return the dotnet version, or raise with setup instructions if it is missing."""
    try:
        result = subprocess.run(["dotnet", "--version"], capture_output=True, text=True, check=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as exc:
        raise DotnetNotFoundError(
            "dotnet command not found. Please add the following step before this action:\n"
            "  - name: Setup .NET SDK\n"
            "    uses: actions/setup-dotnet@v4\n"
            "    with:\n"
            "      dotnet-version: '8.x'"
        ) from exc
    version = result.stdout.strip()
    log(f"Using dotnet {version} for NuGet operations")
    return version


def run_dotnet_nuget(args: list[str], cwd: Path) -> CommandResult:
    try:
        result = subprocess.run(
            ["dotnet", "nuget", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=COMMAND_TIMEOUT,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(returncode=1, stdout="", stderr="Command timed out")
    for line in result.stdout.splitlines():
        log(line)
    return CommandResult(result.returncode, result.stdout, result.stderr)


def find_package(stdout: str, cwd: Path) -> PackResult:
    """Take the path the tool reports, else the one .nupkg it left in ``cwd``."""
    match = CREATED_PACKAGE.search(stdout)
    if match:
        return PackResult(success=True, package_path=Path(match.group(1)))
    packages = sorted(cwd.glob("*.nupkg"))
    if not packages:
        return PackResult(success=False, error="Package was created but could not be located")
    if len(packages) > 1:
        found = ", ".join(p.name for p in packages)
        return PackResult(success=False, error=f"Expected exactly one .nupkg in {cwd}, found: {found}")
    return PackResult(success=True, package_path=packages[0])


def pack_nupkg(nuspec_file: str, cwd: Path) -> PackResult:
    log(f"Running: dotnet nuget pack {Path(nuspec_file).name}")
    try:
        result = run_dotnet_nuget(["pack", nuspec_file], cwd)
    except OSError as exc:
        return PackResult(success=False, error=str(exc))

    if result.returncode != 0:
        return PackResult(
            success=False,
            error=f"NuGet pack failed with exit code {result.returncode}: {result.output}",
        )

    return find_package(result.stdout, cwd)


def push_nupkg(package_path: Path, server: str, api_key: str | None, cwd: Path) -> PushResult:
    """Push to ``server``. Without an API key the feed's trusted publishing (OIDC) is used."""
    args = ["push", str(package_path), "--source", server]
    if api_key and api_key.strip():
        mask(api_key)
        log(f"Running: dotnet nuget push {package_path.name} --source {server} --api-key ***")
        args += ["--api-key", api_key]
    else:
        log(f"Running: dotnet nuget push {package_path.name} --source {server} (using Trusted Publisher/OIDC)")

    try:
        result = run_dotnet_nuget(args, cwd)
    except OSError as exc:
        return PushResult(success=False, error=str(exc))

    if result.returncode != 0:
        return PushResult(
            success=False,
            error=f"NuGet push failed with exit code {result.returncode}: {result.output}",
        )
    return PushResult(success=True)
