from __future__ import annotations

# Generic execution of a TestCase: compile (optional) -> runs -> log comparisons.
#
# Every step is strictly sequential; the first FasedTestError terminates the
# case. `run_cases` is the only place that catches it, to record the failure
# and carry on with the next case.

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import assert_never

from ..exceptions import FasedTestError, ProcessFailure
from ..models import CaseResult, Invocation, MultiRunAndDiff, RunSpec, SingleRun, StepResult, TestCase
from ..settings import Settings
from .invocation import build, compile_target
from .log_diff import assert_equivalent
from .log_extract import extract_lines
from .make_runner import MakeRunner, Runner, backend_available, compile_checked, invoke_checked


logger = logging.getLogger(__name__)

RunnerFactory = Callable[[TestCase, Path], Runner]


@dataclass(frozen=True)
class PlannedRun:
    spec: RunSpec
    log_path: Path | None
    invocation: Invocation


def runs_for(case: TestCase) -> tuple[RunSpec, ...]:
    mode = case.mode
    if isinstance(mode, SingleRun):
        return (RunSpec(behavior=f"run {case.runtime_config.behavior}"),)
    if isinstance(mode, MultiRunAndDiff):
        return mode.runs
    assert_never(mode)


def validate_case(case: TestCase) -> None:
    """Reject multi-run definitions whose comparisons cannot be satisfied."""

    if not isinstance(case.mode, MultiRunAndDiff):
        return
    log_names = [r.log_name for r in case.mode.runs if r.log_name]
    if len(set(log_names)) != len(log_names):
        raise ValueError(f"{case.name}: duplicate log names {log_names}")
    for cmp in case.mode.comparisons:
        for name in (cmp.left, cmp.right):
            if name not in log_names:
                raise ValueError(f"{case.name}: comparison {cmp.behavior!r} references unknown log {name!r}")
        if cmp.header_lines < 0:
            raise ValueError(f"{case.name}: header_lines must be >= 0")


def plan_runs(
    case: TestCase,
    *,
    backend: str,
    debug: bool,
    out_dir: Path,
    sim_dir: Path | None = None,
) -> list[PlannedRun]:
    # Building every invocation up front reads all runtime confs before any process starts.
    planned: list[PlannedRun] = []
    for spec in runs_for(case):
        log_path = (out_dir / spec.log_name).absolute() if spec.log_name else None
        runtime_config = spec.runtime_config if spec.runtime_config is not None else case.runtime_config
        plus_args = spec.plus_args if spec.plus_args is not None else case.plus_args
        invocation = build(
            backend=backend,
            debug=debug,
            runtime_config=runtime_config,
            plus_args=plus_args,
            log_file=log_path,
            make_args=spec.make_args,
            sim_dir=sim_dir,
        )
        planned.append(PlannedRun(spec=spec, log_path=log_path, invocation=invocation))
    return planned


def execute_case(
    case: TestCase,
    *,
    backend: str,
    debug: bool,
    runner: Runner,
    out_dir: Path,
    sim_dir: Path | None = None,
    compile_first: bool = False,
    steps: list[StepResult] | None = None,
) -> CaseResult:
    """Execute one test case and return its (passing) result.

    Raises the first `FasedTestError` encountered. Completed steps are
    appended to ``steps`` when given, so callers can report partial progress.
    """

    done = steps if steps is not None else []
    validate_case(case)
    out_dir.mkdir(parents=True, exist_ok=True)
    planned = plan_runs(case, backend=backend, debug=debug, out_dir=out_dir, sim_dir=sim_dir)

    if compile_first:
        target = compile_target(backend=backend, debug=debug)
        logger.info("%s: compile %s", case.name, target)
        compile_checked(runner, target)
        done.append(StepResult(behavior=f"compile {target}", kind="compile"))

    logs: dict[str, Path] = {}
    for run in planned:
        logger.info("%s: %s", case.name, run.spec.behavior)
        if run.log_path is not None:
            # A run that exits 0 without writing its log must not pick up a previous batch's file.
            run.log_path.unlink(missing_ok=True)
        invoke_checked(runner, run.invocation)
        if run.spec.log_name and run.log_path is not None:
            logs[run.spec.log_name] = run.log_path
        done.append(
            StepResult(
                behavior=run.spec.behavior,
                kind="run",
                log_path=str(run.log_path) if run.log_path is not None else None,
            )
        )

    if isinstance(case.mode, MultiRunAndDiff):
        for cmp in case.mode.comparisons:
            logger.info("%s: %s", case.name, cmp.behavior)
            left_path, right_path = logs[cmp.left], logs[cmp.right]
            left = extract_lines(left_path, cmp.marker, header_lines=cmp.header_lines)
            right = extract_lines(right_path, cmp.marker, header_lines=cmp.header_lines)
            assert_equivalent(left, right, left_path.name, right_path.name)
            done.append(StepResult(behavior=cmp.behavior, kind="compare"))

    return CaseResult(name=case.name, status="passed", steps=tuple(done))


def default_runner_factory(settings: Settings, *, echo: bool = False) -> RunnerFactory:
    def factory(case: TestCase, out_dir: Path) -> Runner:
        return MakeRunner.for_case(case, settings=settings, out_dir=out_dir, echo=echo)

    return factory


def run_cases(
    cases: Iterable[TestCase],
    *,
    backend: str,
    debug: bool,
    settings: Settings,
    runner_factory: RunnerFactory | None = None,
    compile_first: bool | None = None,
) -> list[CaseResult]:
    factory = runner_factory or default_runner_factory(settings)
    compile_first = settings.compile_before_run if compile_first is None else compile_first
    results: list[CaseResult] = []

    for case in cases:
        if settings.skip_unavailable_backends and not backend_available(backend):
            logger.warning("%s: skipped, backend %s is not available", case.name, backend)
            results.append(
                CaseResult(name=case.name, status="skipped", code="backend_unavailable", message=f"backend {backend} not found")
            )
            continue

        out_dir = settings.case_out_dir(case.name)
        steps: list[StepResult] = []
        try:
            result = execute_case(
                case,
                backend=backend,
                debug=debug,
                runner=factory(case, out_dir),
                out_dir=out_dir,
                sim_dir=settings.sim_path(),
                compile_first=compile_first,
                steps=steps,
            )
        except FasedTestError as exc:
            logger.error("%s: FAILED %s", case.name, exc)
            result = CaseResult(
                name=case.name,
                status="failed",
                steps=tuple(steps),
                stage=exc.stage,
                code=exc.code,
                message=str(exc),
                exit_code=exc.exit_code if isinstance(exc, ProcessFailure) else None,
            )
        else:
            logger.info("%s: passed", case.name)
        results.append(result)
    return results
