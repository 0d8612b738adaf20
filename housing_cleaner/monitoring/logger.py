"""Centralized logging configuration using Loguru."""

import sys
from typing import Any

from loguru import logger

from housing_cleaner.core.config import settings


def setup_logging() -> None:
    """Configure Loguru logging for the application."""
    # Remove default handler
    logger.remove()

    console_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    file_format = (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
        "{level: <8} | "
        "{name}:{function}:{line} | "
        "{message} | "
        "{extra}"
    )

    logger.add(
        sys.stderr,
        format=console_format,
        level=settings.log_level,
        colorize=True,
        backtrace=True,
        diagnose=settings.debug,
    )

    if settings.log_to_file:
        logs_dir = settings.logs_dir
        logger.add(
            logs_dir / "housing_cleaner_{time:YYYY-MM-DD}.log",
            format=file_format,
            level="DEBUG",
            rotation="00:00",
            retention="30 days",
            compression="gz",
            backtrace=True,
            diagnose=True,
        )

        logger.add(
            logs_dir / "errors_{time:YYYY-MM-DD}.log",
            format=file_format,
            level="ERROR",
            rotation="00:00",
            retention="90 days",
            compression="gz",
            backtrace=True,
            diagnose=True,
        )

        # Structured run events for log aggregation
        logger.add(
            logs_dir / "housing_cleaner_{time:YYYY-MM-DD}.json",
            format="{message}",
            level="INFO",
            rotation="00:00",
            retention="14 days",
            compression="gz",
            serialize=True,
        )

    logger.info(
        f"Logging initialized | level={settings.log_level} | env={settings.app_env.value}"
    )


def get_logger(name: str) -> Any:
    """Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return logger.bind(name=name)


def log_run_start(run_id: str, source: str, rows: int, **extra: Any) -> None:
    """Log the start of a cleaning run.

    Args:
        run_id: Unique run identifier
        source: Description of the table being cleaned
        rows: Number of rows read
        **extra: Additional context
    """
    logger.bind(run_id=run_id, source=source, rows=rows, **extra).info(
        f"Cleaning run started | id={run_id} | source={source} | rows={rows}"
    )


def log_step_complete(
    step: str, state: str, duration: float, issues: int = 0, **extra: Any
) -> None:
    """Log completion of a single pipeline step.

    Args:
        step: Step name
        state: Table state reached
        duration: Step duration in seconds
        issues: Number of per-record issues raised by the step
        **extra: Additional context
    """
    log_func = logger.warning if issues else logger.info
    log_func(
        f"Step completed | step={step} | state={state} | "
        f"issues={issues} | duration={duration:.3f}s",
        step=step,
        state=state,
        duration=duration,
        issues=issues,
        **extra,
    )


def log_run_complete(
    run_id: str, duration: float, success: bool = True, **extra: Any
) -> None:
    """Log completion of a cleaning run.

    Args:
        run_id: Unique run identifier
        duration: Run duration in seconds
        success: Whether the run completed and the table was written
        **extra: Additional context (report counters)
    """
    status = "SUCCESS" if success else "FAILED"
    log_func = logger.info if success else logger.error

    log_func(
        f"Cleaning run completed | id={run_id} | status={status} | duration={duration:.2f}s",
        run_id=run_id,
        duration=duration,
        success=success,
        **extra,
    )
