from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from fasedtests.app.settings import Settings


@dataclass
class FakeRunner:
    """Stand-in for make: records calls, returns scripted exit codes.

    ``exit_codes`` is consumed one per call (missing entries mean 0).
    ``write_log`` receives (call index, LOGFILE path) for every run that
    names a log file, and is expected to write the simulator output there.
    """

    exit_codes: list[int] = field(default_factory=list)
    write_log: Callable[[int, Path], None] | None = None
    calls: list[tuple[str, ...]] = field(default_factory=list)

    def make(self, *args: str) -> int:
        idx = len(self.calls)
        self.calls.append(args)
        log_file = next((a.split("=", 1)[1] for a in args if a.startswith("LOGFILE=")), None)
        if log_file is not None and self.write_log is not None:
            self.write_log(idx, Path(log_file))
        return self.exit_codes[idx] if idx < len(self.exit_codes) else 0


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    sim_dir = tmp_path / "sim"
    sim_dir.mkdir()
    return Settings(
        sim_dir=str(sim_dir),
        output_root=str(tmp_path / "output"),
        compile_before_run=False,
        skip_unavailable_backends=False,
    )


def write_sim_log(path: Path, body: list[str], *, preamble: tuple[str, ...] = ("Loading runtime conf", "Simulation start")) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join([*preamble, *body]) + "\n", encoding="utf-8")
