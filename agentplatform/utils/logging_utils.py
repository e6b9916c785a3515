"""Logging utilities for the agent platform."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from agentplatform.models import TaskResult


def setup_logging(
    level: int | str = logging.INFO,
    log_dir: Optional[str | Path] = None,
) -> logging.Logger:
    """Setup logging configuration for the platform.

    Console output shows `level` and above; when `log_dir` is given, a
    timestamped file captures everything at DEBUG.

    Args:
        level: Console logging level (default: INFO)
        log_dir: Directory for the session log file (default: no file)

    Returns:
        Configured logger instance
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("agentplatform")
    logger.setLevel(logging.DEBUG)  # Set to DEBUG to capture all child logs
    logger.propagate = False  # Don't propagate to root logger

    # Clear existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / f"agentplatform_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)
        logger.info(f"Log file: {log_file}")

    return logger


def log_task_result(logger: logging.Logger, result: TaskResult) -> None:
    """Log the outcome of one task.

    Args:
        logger: Logger instance
        result: Task result to report
    """
    if result.success:
        logger.info(f"Task completed for agent {result.agent_name} in {result.duration_ms}ms")
        logger.debug(f"  Metadata: {dict(result.metadata)}")
    else:
        logger.warning(
            f"Task failed for agent {result.agent_name} [{result.state.value}]: {result.error_message}"
        )


def log_batch_summary(logger: logging.Logger, results: Sequence[TaskResult], duration_ms: int) -> None:
    """Log success/failure counts for a batch of tasks.

    Args:
        logger: Logger instance
        results: Results of the batch, in submission order
        duration_ms: Wall-clock duration of the whole batch
    """
    failed = [r for r in results if not r.success]
    logger.info(
        f"Completed {len(results)} tasks in {duration_ms}ms "
        f"({len(results) - len(failed)} succeeded, {len(failed)} failed)"
    )
    for result in failed:
        logger.debug(f"  ✗ {result.agent_name}: {result.error_message}")
