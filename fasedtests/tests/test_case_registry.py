from __future__ import annotations

import pytest

from fasedtests.app.models import DEFAULT_RUNTIME_CONFIG, EMPTY_RUNTIME_CONFIG, MultiRunAndDiff, SingleRun, TestCase
from fasedtests.app.services.case_registry import CASES, GROUPS, case_names, get_case, get_group, index_cases
from fasedtests.app.services.case_runner import validate_case


def test_case_names_unique() -> None:
    names = case_names()
    assert len(names) == len(set(names)) == 8


@pytest.mark.parametrize("case", CASES, ids=lambda c: c.name)
def test_every_case_is_valid(case) -> None:
    validate_case(case)
    assert case.design == "AXI4Fuzzer"
    assert case.runtime_config == DEFAULT_RUNTIME_CONFIG


def test_only_hardwired_check_is_multi_run() -> None:
    multi = [c.name for c in CASES if isinstance(c.mode, MultiRunAndDiff)]
    assert multi == ["CheckHardwiredValuesTest"]
    assert all(isinstance(c.mode, SingleRun) for c in CASES if c.name not in multi)


def test_check_hardwired_values_definition() -> None:
    mode = get_case("CheckHardwiredValuesTest").mode
    assert isinstance(mode, MultiRunAndDiff)
    first, second = mode.runs
    assert first.log_name == "using-runtime-conf.out"
    assert first.runtime_config is None
    assert second.runtime_config == EMPTY_RUNTIME_CONFIG
    assert second.plus_args == ("+mm_useHardwareDefaultRuntimeSettings_0",)
    [cmp] = mode.comparisons
    assert (cmp.left, cmp.right, cmp.marker, cmp.header_lines) == (
        "using-runtime-conf.out",
        "using-hardwired-settings.out",
        "AXI4FuzzMaster_0",
        0,
    )


def test_platform_config_string() -> None:
    assert get_case("AXI4FuzzerLBPTest").platform_config_string("F1") == "F1"
    assert get_case("NarrowIdConstraint").platform_config_string("F1") == "ConstrainedIdHostConfig_F1"


def test_groups() -> None:
    assert [c.name for c in get_group("CIGroupA")] == ["AXI4FuzzerLBPTest", "AXI4FuzzerFRFCFSTest"]
    assert [c.name for c in get_group("CIGroupB")] == ["AXI4FuzzerLLCDRAMTest", "NarrowIdConstraint"]
    assert set(GROUPS) == {"CIGroupA", "CIGroupB"}


def test_unknown_names() -> None:
    with pytest.raises(KeyError, match="unknown test case"):
        get_case("NoSuchTest")
    with pytest.raises(KeyError, match="unknown group"):
        get_group("CIGroupZ")


def test_index_cases_rejects_duplicate_names() -> None:
    cases = [TestCase("Dup", "AXI4Fuzzer", "DefaultConfig"), TestCase("Dup", "AXI4Fuzzer", "OtherConfig")]
    with pytest.raises(ValueError, match="duplicate test case name 'Dup'"):
        index_cases(cases)
    assert list(index_cases(CASES)) == case_names()
