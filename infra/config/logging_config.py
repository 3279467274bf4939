from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoggingConfig(BaseModel):
    """
    Logging for an evaluation run; passed straight to
    infra.logging_setup.init_logging().
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(
        "challenge",
        description="Logger name; also used as log file prefix.",
    )
    level: str = Field(
        "INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )
    log_dir: str = Field(
        "logs",
        description="Directory for per-run log files; LOG_DIR overrides it.",
    )
    to_console: bool = Field(True, description="Log to stderr.")
    to_file: bool = Field(True, description="Write logs/<name>_<timestamp>.log.")

    @field_validator("level", mode="before")
    @classmethod
    def _norm_level(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
                raise ValueError(f"unknown log level {v!r}")
        return v
