from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..models import Invocation, RuntimeConfig
from .runtime_config import resolve


EXTRA_SIM_ARGS = "EXTRA_SIM_ARGS"
LOGFILE = "LOGFILE"


def build(
    *,
    backend: str,
    debug: bool,
    runtime_config: RuntimeConfig,
    plus_args: Sequence[str] = (),
    log_file: Path | None = None,
    make_args: Sequence[str] = (),
    sim_dir: Path | None = None,
) -> Invocation:
    """Assemble the make arguments for one simulator run.

    Order is fixed: runtime conf (if any), plus-args (always, possibly empty),
    log file (if any), then ``make_args`` verbatim.
    """

    args: list[str] = []
    runtime_arg = resolve(runtime_config, sim_dir=sim_dir)
    if runtime_arg is not None:
        args.append(runtime_arg)
    args.append(f"{EXTRA_SIM_ARGS}={' '.join(plus_args)}")
    if log_file is not None:
        args.append(f"{LOGFILE}={log_file}")
    args.extend(make_args)
    return Invocation(backend=backend, debug=debug, args=tuple(args))


def compile_target(*, backend: str, debug: bool) -> str:
    return backend + ("-debug" if debug else "")
