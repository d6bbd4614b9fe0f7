#
# FASED test cases and CI groupings.
#
from __future__ import annotations

from collections.abc import Iterable

from ..models import EMPTY_RUNTIME_CONFIG, LogComparison, MultiRunAndDiff, RunSpec, TestCase


FUZZER = "AXI4Fuzzer"
FUZZ_MASTER_MARKER = "AXI4FuzzMaster_0"

# Target output must match between the default runtime.conf and the values
# hardwired into the configuration registers at reset.
CHECK_HARDWIRED_VALUES = MultiRunAndDiff(
    runs=(
        RunSpec(behavior="run using a runtime.conf", log_name="using-runtime-conf.out"),
        RunSpec(
            behavior="run using initialization values",
            log_name="using-hardwired-settings.out",
            runtime_config=EMPTY_RUNTIME_CONFIG,
            plus_args=("+mm_useHardwareDefaultRuntimeSettings_0",),
        ),
    ),
    comparisons=(
        LogComparison(
            behavior="initialization values for configuration registers produce the same target behavior "
            "as using the default runtime.conf",
            left="using-runtime-conf.out",
            right="using-hardwired-settings.out",
            marker=FUZZ_MASTER_MARKER,
            header_lines=0,
        ),
    ),
)


CASES: tuple[TestCase, ...] = (
    TestCase("AXI4FuzzerLBPTest", FUZZER, "DefaultConfig"),
    TestCase("CheckHardwiredValuesTest", FUZZER, "NT10e3_AddrBits16_DefaultConfig", mode=CHECK_HARDWIRED_VALUES),
    TestCase("AXI4FuzzerMultiChannelTest", FUZZER, "FuzzMask3FFF_QuadFuzzer_QuadChannel_DefaultConfig"),
    TestCase("AXI4FuzzerFCFSTest", FUZZER, "FCFSConfig"),
    TestCase("AXI4FuzzerFRFCFSTest", FUZZER, "FRFCFSConfig"),
    # TODO: check that the LLC uses at most the configured number of MSHRs
    # (+mm_llc_activeMSHRs / +expect_llc_peakMSHRsUsed) once the target exposes the peak count.
    TestCase("AXI4FuzzerLLCDRAMTest", FUZZER, "LLCDRAMConfig"),
    # Target memory system that uses the whole host memory system.
    TestCase(
        "BaselineMultichannelTest",
        FUZZER,
        "AddrBits22_QuadFuzzer_DefaultConfig",
        platform_configs=("AddrBits22_SmallQuadChannelHostConfig",),
    ),
    # ID reallocation on platforms with limited ID space.
    TestCase("NarrowIdConstraint", FUZZER, "DefaultConfig", platform_configs=("ConstrainedIdHostConfig",)),
)

GROUPS: dict[str, tuple[str, ...]] = {
    "CIGroupA": ("AXI4FuzzerLBPTest", "AXI4FuzzerFRFCFSTest"),
    "CIGroupB": ("AXI4FuzzerLLCDRAMTest", "NarrowIdConstraint"),
}

def index_cases(cases: Iterable[TestCase]) -> dict[str, TestCase]:
    by_name: dict[str, TestCase] = {}
    for case in cases:
        if case.name in by_name:
            raise ValueError(f"duplicate test case name {case.name!r}")
        by_name[case.name] = case
    return by_name


_BY_NAME = index_cases(CASES)


def case_names() -> list[str]:
    return [c.name for c in CASES]


def get_case(name: str) -> TestCase:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"unknown test case {name!r}; known: {', '.join(case_names())}") from None


def get_group(name: str) -> list[TestCase]:
    try:
        members = GROUPS[name]
    except KeyError:
        raise KeyError(f"unknown group {name!r}; known: {', '.join(GROUPS)}") from None
    return [get_case(n) for n in members]
