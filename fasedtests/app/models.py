from __future__ import annotations

# Value objects shared by the invocation builder, the case runner and the
# registry. Everything here is immutable once constructed.

from dataclasses import dataclass
from typing import Literal, Union


# --- Runtime configuration sources -------------------------------------------------


@dataclass(frozen=True)
class DefaultRuntimeConfig:
    # Use the runtime.conf generated alongside the simulator.
    @property
    def behavior(self) -> str:
        return "with default runtime conf"


@dataclass(frozen=True)
class EmptyRuntimeConfig:
    # No base conf; plus-args must be supplied by the case itself.
    @property
    def behavior(self) -> str:
        return "with no base runtime conf"


@dataclass(frozen=True)
class CustomRuntimeConfig:
    # Path is relative to the simulation working directory.
    path: str

    @property
    def behavior(self) -> str:
        return f"with runtime conf {self.path}"


RuntimeConfig = Union[DefaultRuntimeConfig, EmptyRuntimeConfig, CustomRuntimeConfig]

DEFAULT_RUNTIME_CONFIG = DefaultRuntimeConfig()
EMPTY_RUNTIME_CONFIG = EmptyRuntimeConfig()


# --- Invocation ---------------------------------------------------------------------


@dataclass(frozen=True)
class Invocation:
    """One external simulator run: backend selector plus ordered make arguments."""

    backend: str
    debug: bool
    args: tuple[str, ...]

    @property
    def target(self) -> str:
        return f"run-{self.backend}" + ("-debug" if self.debug else "")


# --- Execution modes ----------------------------------------------------------------


@dataclass(frozen=True)
class RunSpec:
    # One run inside a multi-run case. ``None`` fields inherit the case defaults.
    behavior: str
    log_name: str | None = None
    runtime_config: RuntimeConfig | None = None
    plus_args: tuple[str, ...] | None = None
    make_args: tuple[str, ...] = ()


@dataclass(frozen=True)
class LogComparison:
    # Compare the extracts of two logs (by RunSpec.log_name).
    behavior: str
    left: str
    right: str
    marker: str
    header_lines: int = 0


@dataclass(frozen=True)
class SingleRun:
    pass


@dataclass(frozen=True)
class MultiRunAndDiff:
    runs: tuple[RunSpec, ...]
    comparisons: tuple[LogComparison, ...]


ExecutionMode = Union[SingleRun, MultiRunAndDiff]

SINGLE_RUN = SingleRun()


@dataclass(frozen=True)
class TestCase:
    """Declarative definition of one FASED test case.

    Attributes:
        name: Unique case name used for selection.
        design: DESIGN, the target top-level module.
        target_config: TARGET_CONFIG string parameterizing the target.
        platform_configs: PLATFORM_CONFIG fragments, base config excluded.
        runtime_config: Default runtime conf handling for runs.
        plus_args: Non-standard plus-args added to every run by default.
        mode: How the case executes (one run, or several runs plus log diffs).
    """

    __test__ = False  # keep pytest from collecting this class

    name: str
    design: str
    target_config: str
    platform_configs: tuple[str, ...] = ()
    runtime_config: RuntimeConfig = DEFAULT_RUNTIME_CONFIG
    plus_args: tuple[str, ...] = ()
    mode: ExecutionMode = SINGLE_RUN

    def platform_config_string(self, base_platform_config: str) -> str:
        return "_".join([*self.platform_configs, base_platform_config])


# --- Diff results -------------------------------------------------------------------


@dataclass(frozen=True)
class DiffEqual:
    left_label: str
    right_label: str
    line_count: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class DiffUnequal:
    """First divergence between two extracts. ``None`` marks a missing line."""

    index: int
    left_line: str | None
    right_line: str | None
    left_label: str
    right_label: str
    left_lines: tuple[str, ...]
    right_lines: tuple[str, ...]
    context: int = 5

    @property
    def ok(self) -> bool:
        return False

    def report(self) -> str:
        def show(value: str | None) -> str:
            return "<missing>" if value is None else repr(value)

        width = max(len(self.left_label), len(self.right_label))
        out = [
            f"{self.left_label} and {self.right_label} differ at line {self.index + 1} (index {self.index})",
            f"  {self.left_label.ljust(width)} : {show(self.left_line)}",
            f"  {self.right_label.ljust(width)} : {show(self.right_line)}",
        ]
        if len(self.left_lines) != len(self.right_lines):
            out.append(f"  line counts: {len(self.left_lines)} vs {len(self.right_lines)}")

        start = max(0, self.index - self.context)
        end = min(max(len(self.left_lines), len(self.right_lines)), self.index + self.context + 1)
        out.append(f"Aligned listing (lines {start + 1}-{end}):")
        for i in range(start, end):
            left = self.left_lines[i] if i < len(self.left_lines) else None
            right = self.right_lines[i] if i < len(self.right_lines) else None
            flag = " " if left == right else "!"
            out.append(f"{flag} {i + 1:>6} | {show(left)} | {show(right)}")
        return "\n".join(out)


DiffResult = Union[DiffEqual, DiffUnequal]


# --- Results ------------------------------------------------------------------------


CaseStatus = Literal["passed", "failed", "skipped"]


@dataclass(frozen=True)
class StepResult:
    behavior: str
    kind: Literal["compile", "run", "compare"]
    log_path: str | None = None


@dataclass(frozen=True)
class CaseResult:
    name: str
    status: CaseStatus
    steps: tuple[StepResult, ...] = ()
    stage: str | None = None
    code: str | None = None
    message: str | None = None
    exit_code: int | None = None
