"""Global configuration — loaded from environment variables."""

from enum import Enum

from pydantic_settings import BaseSettings


class VerdictMode(str, Enum):
    SHORT = "short"  # stop as soon as a failure is known
    FULL = "full"  # wait for every check to finish


class ProcwardenSettings(BaseSettings):
    capacity: int = 32
    use_process_group: bool = True
    log_level: str = "INFO"

    # Health-check pacing
    check_timeout: float = 30.0
    kill_timeout: float = 5.0
    poll_interval: float = 0.05
    verdict_mode: VerdictMode = VerdictMode.SHORT

    model_config = {"env_prefix": "PROCWARDEN_"}


settings = ProcwardenSettings()
