"""Worker configuration, read from the environment (and a .env file if present)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

DEFAULT_TEMPORAL_ADDRESS = "localhost:7233"
DEFAULT_NAMESPACE = "default"
DEFAULT_TASK_QUEUE = "ballot-workflow"


@dataclass(frozen=True)
class WorkerConfig:
    temporal_address: str = DEFAULT_TEMPORAL_ADDRESS
    temporal_namespace: str = DEFAULT_NAMESPACE
    task_queue: str = DEFAULT_TASK_QUEUE
    log_level: str = "INFO"
    activity_timeout_seconds: float = 10.0

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, *, dotenv: bool = True
    ) -> WorkerConfig:
        """Build a config from environment variables.

        Args:
            environ: mapping to read instead of os.environ (tests).
            dotenv: load a .env file into os.environ first. Ignored when
                    environ is given.

        Raises:
            ValueError: ACTIVITY_TIMEOUT_SECONDS is not a positive number.
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        timeout = float(environ.get("ACTIVITY_TIMEOUT_SECONDS", "10.0"))
        if timeout <= 0:
            raise ValueError(f"ACTIVITY_TIMEOUT_SECONDS must be positive, got {timeout}")

        return cls(
            temporal_address=environ.get("TEMPORAL_ADDRESS", DEFAULT_TEMPORAL_ADDRESS),
            temporal_namespace=environ.get("TEMPORAL_NAMESPACE", DEFAULT_NAMESPACE),
            task_queue=environ.get("BALLOT_TASK_QUEUE", DEFAULT_TASK_QUEUE),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
            activity_timeout_seconds=timeout,
        )
