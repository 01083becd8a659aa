"""Minimal GitHub Actions host channel: inputs, log lines, masks and step outputs."""

from __future__ import annotations

import os
import uuid
from pathlib import Path


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def log(msg: str) -> None:
    print(f"[publish] {msg}", flush=True)


def error(msg: str) -> None:
    print(f"::error::{escape_data(msg)}", flush=True)


def mask(secret: str) -> None:
    """Ask the runner to redact `secret` from every later log line."""
    if secret.strip():
        print(f"::add-mask::{escape_data(secret)}", flush=True)


def get_input(name: str, default: str = "") -> str:
    value = os.environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "")
    return value.strip() or default


def input_flag(name: str, default: bool) -> bool:
    value = get_input(name)
    if not value:
        return default
    return value.lower() == "true"


def set_outputs(values: dict[str, str]) -> None:
    """Append step outputs to GITHUB_OUTPUT, using the heredoc form for multiline values."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        for key, value in values.items():
            log(f"output {key}={value}")
        return
    with Path(output_path).open("a", encoding="utf-8") as output:
        for key, value in values.items():
            if "\n" in value or "\r" in value:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                output.write(f"{key}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                output.write(f"{key}={value}\n")
