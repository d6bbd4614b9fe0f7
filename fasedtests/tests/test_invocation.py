from __future__ import annotations

from pathlib import Path

from fasedtests.app.models import DEFAULT_RUNTIME_CONFIG, EMPTY_RUNTIME_CONFIG, CustomRuntimeConfig
from fasedtests.app.services.invocation import build, compile_target


def test_build_full_argument_order(tmp_path: Path) -> None:
    conf = tmp_path / "runtime.conf"
    conf.write_text("+a=1\n+b=2\n", encoding="utf-8")
    log = tmp_path / "out.log"

    inv = build(
        backend="verilator",
        debug=False,
        runtime_config=CustomRuntimeConfig(str(conf)),
        plus_args=["+p0", "+p1"],
        log_file=log,
        make_args=["FOO=1", "BAR=2"],
    )

    assert inv.args == (
        "COMMON_SIM_ARGS=+a=1 +b=2",
        "EXTRA_SIM_ARGS=+p0 +p1",
        f"LOGFILE={log}",
        "FOO=1",
        "BAR=2",
    )
    assert inv.target == "run-verilator"


def test_build_default_config_always_has_plus_args_slot() -> None:
    inv = build(backend="vcs", debug=True, runtime_config=DEFAULT_RUNTIME_CONFIG)
    assert inv.args == ("EXTRA_SIM_ARGS=",)
    assert inv.target == "run-vcs-debug"


def test_build_empty_config_with_plus_args() -> None:
    inv = build(
        backend="verilator",
        debug=False,
        runtime_config=EMPTY_RUNTIME_CONFIG,
        plus_args=["+mm_useHardwareDefaultRuntimeSettings_0"],
    )
    assert inv.args == ("COMMON_SIM_ARGS=", "EXTRA_SIM_ARGS=+mm_useHardwareDefaultRuntimeSettings_0")


def test_build_is_stable() -> None:
    kwargs = dict(backend="verilator", debug=False, runtime_config=EMPTY_RUNTIME_CONFIG, make_args=["X=1"])
    assert build(**kwargs) == build(**kwargs)


def test_compile_target() -> None:
    assert compile_target(backend="verilator", debug=False) == "verilator"
    assert compile_target(backend="verilator", debug=True) == "verilator-debug"
