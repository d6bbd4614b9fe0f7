#
# Error taxonomy for test execution.
#
from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import DiffUnequal


class FasedTestError(Exception):
    """Base class for every failure that terminates a test case.

    ``stage`` names the step that failed (config, process, extract, diff) and
    ``code`` is a short machine-readable tag used in reports.
    """

    stage: str = "unknown"
    code: str = "error"

    def __init__(self, message: str):
        super().__init__(f"[{self.stage}] {message}")
        self.detail = message


class ConfigReadError(FasedTestError):
    stage = "config"
    code = "config_read_failed"

    def __init__(self, path: Path, reason: str):
        super().__init__(f"cannot read runtime config {path}: {reason}")
        self.path = path
        self.reason = reason


class ProcessFailure(FasedTestError):
    stage = "process"
    code = "process_failed"

    def __init__(self, target: str, exit_code: int, args: Sequence[str] = ()):
        super().__init__(f"make {target} exited with code {exit_code}")
        self.target = target
        self.exit_code = exit_code
        self.args_list = list(args)


class ProcessLaunchError(FasedTestError):
    stage = "process"
    code = "process_launch_failed"

    def __init__(self, cmd: Sequence[str], reason: str):
        super().__init__(f"cannot start {cmd[0]}: {reason}")
        self.cmd = list(cmd)
        self.reason = reason


class FileReadError(FasedTestError):
    stage = "extract"
    code = "log_read_failed"

    def __init__(self, path: Path, reason: str):
        super().__init__(f"cannot read log {path}: {reason}")
        self.path = path
        self.reason = reason


class MarkerNotFound(FasedTestError):
    stage = "extract"
    code = "marker_not_found"

    def __init__(self, path: Path, marker: str):
        super().__init__(f"marker {marker!r} not found in {path}")
        self.path = path
        self.marker = marker


class EquivalenceMismatch(FasedTestError):
    stage = "diff"
    code = "equivalence_mismatch"

    def __init__(self, result: DiffUnequal):
        super().__init__(result.report())
        self.result = result
