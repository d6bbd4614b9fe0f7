from __future__ import annotations

# Runtime configuration -> COMMON_SIM_ARGS make argument.

import logging
from pathlib import Path
from typing import assert_never

from ..exceptions import ConfigReadError
from ..models import CustomRuntimeConfig, DefaultRuntimeConfig, EmptyRuntimeConfig, RuntimeConfig


logger = logging.getLogger(__name__)

COMMON_SIM_ARGS = "COMMON_SIM_ARGS"


def read_conf_lines(path: Path) -> list[str]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigReadError(path, f"{type(exc).__name__}: {exc}") from exc
    # Only line terminators split; form feeds, NEL and other separators stay in the argument.
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def resolve(cfg: RuntimeConfig, *, sim_dir: Path | None = None) -> str | None:
    """Resolve a runtime configuration source to an optional make argument.

    Custom conf files are read eagerly so a missing file fails before any
    process is launched. Relative paths are taken against ``sim_dir``.
    """

    if isinstance(cfg, DefaultRuntimeConfig):
        return None
    if isinstance(cfg, EmptyRuntimeConfig):
        return f"{COMMON_SIM_ARGS}="
    if isinstance(cfg, CustomRuntimeConfig):
        path = Path(cfg.path)
        if sim_dir is not None and not path.is_absolute():
            path = sim_dir / path
        lines = read_conf_lines(path)
        logger.debug("runtime conf %s: %d lines", path, len(lines))
        return f"{COMMON_SIM_ARGS}={' '.join(lines)}"
    assert_never(cfg)
