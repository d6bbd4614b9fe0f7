from __future__ import annotations

"""Streaming of make output into the per-case terminal log."""

import sys
from pathlib import Path
from typing import BinaryIO


def stream_terminal_log(
    *,
    stdout: BinaryIO,
    log_path: Path,
    max_bytes: int,
    echo: BinaryIO | None = None,
) -> int:
    """Copy ``stdout`` into ``log_path`` (append) up to ``max_bytes``.

    The stream is always drained to EOF so the child never blocks on a full
    pipe, even after the cap is reached. Returns the number of bytes written.
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with log_path.open("ab") as log_file:
        while True:
            raw = stdout.read(4096)
            if not raw:
                break
            if echo is not None:
                echo.write(raw)
                echo.flush()
            if written >= max_bytes:
                continue
            out = raw[: max(0, int(max_bytes) - written)]
            log_file.write(out)
            log_file.flush()
            written += len(out)
    return written


def stderr_echo() -> BinaryIO:
    return sys.stderr.buffer
