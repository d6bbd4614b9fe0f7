from __future__ import annotations

"""Build-system runner.

The engine only ever talks to the simulator through :class:`Runner`. The
production implementation shells out to ``make -C <sim_dir>`` and streams the
combined stdout/stderr into the case's ``terminal.log``.
"""

import logging
import shlex
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..exceptions import ProcessFailure, ProcessLaunchError
from ..models import Invocation, TestCase
from ..settings import Settings
from ._terminal_log import stderr_echo, stream_terminal_log


logger = logging.getLogger(__name__)

# Backend -> executable that must be on PATH for the backend to be usable.
BACKEND_EXECUTABLES: dict[str, str] = {
    "verilator": "verilator",
    "vcs": "vcs",
    "xcelium": "xrun",
}


class Runner(Protocol):
    def make(self, *args: str) -> int: ...


@dataclass(frozen=True)
class MakeRunnerConfig:
    """Everything `MakeRunner` needs to build its command line."""

    make_cmd: str
    sim_dir: Path
    common_args: tuple[str, ...]
    log_path: Path
    max_log_bytes: int
    echo: bool = False


def common_make_args(case: TestCase, settings: Settings) -> tuple[str, ...]:
    return (
        f"TARGET_PROJECT={settings.target_project}",
        f"DESIGN={case.design}",
        f"TARGET_CONFIG={case.target_config}",
        f"PLATFORM_CONFIG={case.platform_config_string(settings.base_platform_config)}",
    )


class MakeRunner:
    def __init__(self, config: MakeRunnerConfig):
        self.config = config
        # Bytes already in terminal.log; None until the first make() resets it.
        self._log_bytes: int | None = None

    @classmethod
    def for_case(cls, case: TestCase, *, settings: Settings, out_dir: Path, echo: bool = False) -> MakeRunner:
        return cls(
            MakeRunnerConfig(
                make_cmd=settings.make_cmd,
                sim_dir=settings.sim_path(),
                common_args=common_make_args(case, settings),
                log_path=out_dir / "terminal.log",
                max_log_bytes=settings.max_terminal_log_bytes,
                echo=echo,
            )
        )

    def command(self, args: Sequence[str]) -> list[str]:
        cfg = self.config
        return [cfg.make_cmd, "-C", str(cfg.sim_dir), *args, *cfg.common_args]

    def make(self, *args: str) -> int:
        cfg = self.config
        cmd = self.command(args)
        logger.debug("exec: %s", shlex.join(cmd))
        if self._log_bytes is None:
            cfg.log_path.unlink(missing_ok=True)
            self._log_bytes = 0
        try:
            process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
        except OSError as exc:
            logger.error("cannot start %s: %s", cfg.make_cmd, exc)
            raise ProcessLaunchError(cmd, str(exc)) from exc
        with process:
            assert process.stdout is not None
            # The cap covers every make call of the case, not each call separately.
            self._log_bytes += stream_terminal_log(
                stdout=process.stdout,
                log_path=cfg.log_path,
                max_bytes=max(0, cfg.max_log_bytes - self._log_bytes),
                echo=stderr_echo() if cfg.echo else None,
            )
            return int(process.wait())


def invoke(runner: Runner, invocation: Invocation) -> int:
    return runner.make(invocation.target, *invocation.args)


def invoke_checked(runner: Runner, invocation: Invocation) -> None:
    """Run ``invocation`` and raise `ProcessFailure` on a non-zero exit code."""

    exit_code = invoke(runner, invocation)
    if exit_code != 0:
        logger.error("%s failed: exit=%s", invocation.target, exit_code)
        raise ProcessFailure(invocation.target, exit_code, invocation.args)


def compile_checked(runner: Runner, target: str) -> None:
    exit_code = runner.make(target)
    if exit_code != 0:
        logger.error("%s failed: exit=%s", target, exit_code)
        raise ProcessFailure(target, exit_code)


def backend_available(backend: str) -> bool:
    executable = BACKEND_EXECUTABLES.get(backend, backend)
    return shutil.which(executable) is not None
