import os

from pydantic import BaseModel


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


class PacerSettings(BaseModel):
    # Reject negative delays; when disabled they are clamped to 0 (fire immediately)
    strict_delay: bool = _env_flag("PACER_STRICT_DELAY", "1")
    # Log every underlying execution at DEBUG level, with its trigger
    log_executions: bool = _env_flag("PACER_LOG_EXECUTIONS", "0")


PACER_SETTINGS = PacerSettings()
