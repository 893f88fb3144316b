"""ANSI-colored console logging for the conversion lifecycle.

Each stage of a job's life gets its own color so interleaved jobs are easy
to follow in the terminal:

    Green   : upload / completion
    Yellow  : scheduling
    Magenta : conversion
    Red     : failures
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


class _Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


class PipelineStage:
    """Lifecycle stages as (label, color, icon) tuples."""

    UPLOAD = ("UPLOAD", _Colors.GREEN, "📁")
    SCHEDULE = ("SCHEDULE", _Colors.YELLOW, "⏱️")
    CONVERT = ("CONVERT", _Colors.MAGENTA, "⚙️")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")
    ERROR = ("ERROR", _Colors.RED, "❌")


def _format_kwargs(kwargs: dict[str, Any], color: str = _Colors.GRAY) -> str:
    if not kwargs:
        return ""
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {color}({details}){_Colors.RESET}"


class PipelineLogger:
    """Color-coded logger for conversion jobs.

    Usage:
        log = PipelineLogger("ConversionScheduler")
        log.step_start(PipelineStage.SCHEDULE, "Queued job", job_id=job.id)
        log.step_complete(PipelineStage.COMPLETE, "Job completed", job_id=job.id)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        self._logger.info(
            "%s%s%s [%s]%s %s%s%s%s",
            color, _Colors.BOLD, icon, label, _Colors.RESET,
            color, message, _Colors.RESET, _format_kwargs(kwargs),
        )

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        self._logger.info(
            "%s%s [%s]%s %s✓ %s%s%s",
            color, icon, label, _Colors.RESET,
            _Colors.GREEN, message, _Colors.RESET, _format_kwargs(kwargs),
        )

    def step_error(
        self, stage: tuple[str, str, str], message: str, error: BaseException | None = None
    ) -> None:
        label, _, icon = stage
        suffix = ""
        if error is not None:
            suffix = f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(
            "%s%s%s [%s]%s %s%s%s%s",
            _Colors.RED, _Colors.BOLD, icon, label, _Colors.RESET,
            _Colors.RED, message, _Colors.RESET, suffix,
        )

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Log start and end of a block with the elapsed time.

        Usage:
            with log.timed_step(PipelineStage.CONVERT, "Converting", job_id=job.id):
                await converter.convert(job)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message}: failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message}: {elapsed:.2f}s", **kwargs)
