from __future__ import annotations

import logging
from pathlib import Path

from ..exceptions import FileReadError, MarkerNotFound


logger = logging.getLogger(__name__)


def extract_lines(path: Path, marker: str, *, header_lines: int = 0) -> list[str]:
    """Return the lines following the first line containing ``marker``.

    The marker line itself is excluded and the next ``header_lines`` lines
    are dropped. Line terminators are stripped; nothing else is normalized.
    Undecodable bytes are kept via ``surrogateescape`` so two logs still
    compare byte-for-byte.
    """

    if header_lines < 0:
        raise ValueError(f"header_lines must be >= 0, got {header_lines}")

    found = False
    to_skip = header_lines
    lines: list[str] = []
    try:
        with path.open("r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            for raw in f:
                line = raw.rstrip("\r\n")
                if not found:
                    found = marker in line
                    continue
                if to_skip > 0:
                    to_skip -= 1
                    continue
                lines.append(line)
    except OSError as exc:
        raise FileReadError(path, f"{type(exc).__name__}: {exc}") from exc

    if not found:
        raise MarkerNotFound(path, marker)
    logger.debug("extracted %d lines after %r from %s", len(lines), marker, path)
    return lines
