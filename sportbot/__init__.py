"""SportBot results service - prediction grading and editorial picks."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from .logging_config import configure_logging

configure_logging(
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    json_logs=os.getenv("JSON_LOGS", "true").lower() == "true",
    service_name=os.getenv("SERVICE_NAME", "sportbot-results"),
)


def _version_file_candidates(start: Path) -> Iterable[Path]:
    """Yield VERSION file locations, closest first."""
    override = os.getenv("SPORTBOT_VERSION_FILE")
    if override:
        yield Path(override)

    for parent in start.parents:
        yield parent / "VERSION"

    yield Path.cwd() / "VERSION"


def _load_version() -> str:
    for candidate in _version_file_candidates(Path(__file__).resolve()):
        try:
            if candidate.is_file():
                value = candidate.read_text(encoding="utf-8").strip()
                if value:
                    return value
        except OSError:
            continue
    return "0.0.0"


__version__ = _load_version()
