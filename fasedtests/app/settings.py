from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FASED_", extra="ignore")

    # Paths
    sim_dir: str = "sim"
    output_root: str = "output"

    # Build system
    make_cmd: str = "make"
    target_project: str = "fasedtests"
    # Appended last to every case's PLATFORM_CONFIG fragments.
    base_platform_config: str = "F1"

    # Defaults for the selection surface
    default_backend: str = "verilator"
    default_debug: bool = False
    compile_before_run: bool = True
    skip_unavailable_backends: bool = True

    # Output limits
    max_terminal_log_bytes: int = Field(default=52_428_800, ge=0)  # 50MB

    log_level: str = "INFO"

    def sim_path(self) -> Path:
        return Path(self.sim_dir)

    def case_out_dir(self, case_name: str) -> Path:
        return Path(self.output_root) / self.target_project / case_name

    def ensure_dirs(self) -> None:
        Path(self.output_root).mkdir(parents=True, exist_ok=True)


SETTINGS = Settings()
