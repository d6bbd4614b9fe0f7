from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .models import MultiRunAndDiff
from .services.case_registry import CASES, GROUPS, get_case, get_group
from .services.case_runner import RunnerFactory, default_runner_factory, run_cases
from .services.run_report import finalize_report, init_report, write_report
from .settings import SETTINGS, Settings


logger = logging.getLogger("fasedtests")


def _add_run_options(parser: argparse.ArgumentParser, settings: Settings) -> None:
    parser.add_argument("--backend", default=settings.default_backend, help="simulation backend (default: %(default)s)")
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=settings.default_debug,
        help="use the -debug backend variant (default: %(default)s)",
    )
    parser.add_argument("--no-compile", action="store_true", help="skip the per-case compile step")
    parser.add_argument("--report", type=Path, default=None, help="report.json path (default: <output_root>/report.json)")
    parser.add_argument("--echo", action="store_true", help="also stream make output to stderr")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fasedtests", description="Run FASED memory-model simulator tests.")
    parser.add_argument("--log-level", default=settings.log_level)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="list test cases and groups")

    run_p = sub.add_parser("run", help="run test cases by name")
    run_p.add_argument("names", nargs="+")
    _add_run_options(run_p, settings)

    group_p = sub.add_parser("group", help="run a CI group")
    group_p.add_argument("name", choices=sorted(GROUPS))
    _add_run_options(group_p, settings)
    return parser


def list_cases() -> None:
    for case in CASES:
        mode = "multi-run+diff" if isinstance(case.mode, MultiRunAndDiff) else "single-run"
        print(f"{case.name:<28} {case.design}:{case.target_config} [{mode}] {case.runtime_config.behavior}")
    for name, members in GROUPS.items():
        print(f"{name}: {' '.join(members)}")


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: Settings | None = None,
    runner_factory: RunnerFactory | None = None,
) -> int:
    settings = settings or SETTINGS
    args = build_parser(settings).parse_args(argv)
    logging.basicConfig(level=str(args.log_level).upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "list":
        list_cases()
        return 0

    try:
        if args.command == "group":
            cases, selection = get_group(args.name), args.name
        else:
            cases, selection = [get_case(n) for n in args.names], " ".join(args.names)
    except KeyError as exc:
        print(exc.args[0], file=sys.stderr)
        return 2

    settings.ensure_dirs()
    results = run_cases(
        cases,
        backend=args.backend,
        debug=args.debug,
        settings=settings,
        runner_factory=runner_factory or default_runner_factory(settings, echo=args.echo),
        compile_first=False if args.no_compile else None,
    )
    report = finalize_report(init_report(backend=args.backend, debug=args.debug, selection=selection), results)
    report_path = args.report or Path(settings.output_root) / "report.json"
    write_report(report_path, report)

    summary = report["summary"]
    logger.info(
        "passed=%d failed=%d skipped=%d report=%s",
        summary["passed"],
        summary["failed"],
        summary["skipped"],
        report_path,
    )
    for result in results:
        if result.status == "failed":
            print(f"FAILED {result.name}\n{result.message}", file=sys.stderr)
    return 0 if report["status"] == "succeeded" else 1


if __name__ == "__main__":
    raise SystemExit(main())
