"""Logging configuration for goodfeed."""
import logging
import logging.handlers
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional


def setup_logging(
    level: str = "INFO",
    fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_dir: Optional[Path] = None,
    retention_days: int = 30,
) -> logging.Logger:
    """Configure console logging, plus a rotating file when ``log_dir`` is set.

    Args:
        level: Console log level name
        fmt: Log record format
        log_dir: Directory for daily log files (created if missing)
        retention_days: How many days of log files to keep
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove existing handlers (avoid duplicates)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(logging.Formatter(fmt))
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        cleanup_old_logs(log_dir, retention_days)

        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=log_dir / f"{datetime.now().strftime('%Y-%m-%d')}.log",
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(fmt))
        root_logger.addHandler(file_handler)

    return root_logger


def cleanup_old_logs(log_dir: Path, retention_days: int) -> None:
    """Delete log files older than retention_days."""
    if not log_dir.exists():
        return

    cutoff_date = datetime.now() - timedelta(days=retention_days)

    for log_file in log_dir.glob("*.log"):
        try:
            file_date = datetime.strptime(log_file.stem, "%Y-%m-%d")
            if file_date < cutoff_date:
                log_file.unlink()
                logging.debug("Deleted old log file: %s", log_file.name)
        except (ValueError, OSError):
            # Not a dated log file, or not deletable
            continue
