"""Shared logging utilities."""

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"

SENSITIVE_MARKERS = ("key", "authorization", "token", "cookie")

# Single worker keeps lines in order without blocking the event loop.
_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cli-log")


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Queue a line for the rolling CLI log file."""
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    _executor.submit(_append_line, log_file or CLI_LOG_FILE, line)


def _append_line(log_file: Path, line: str) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    with log_file.open("a") as f:
        f.write(line)


def flush_log_executor() -> None:
    """Block until every queued log line is written."""
    _executor.submit(lambda: None).result()


def shutdown_log_executor() -> None:
    """Flush pending lines and stop the writer thread."""
    _executor.shutdown(wait=True)


def redact_headers(headers: list[tuple[str, str]]) -> list[tuple[str, str]]:
    """Redact sensitive header values."""
    redacted = []
    for key, value in headers:
        if any(marker in key.lower() for marker in SENSITIVE_MARKERS):
            redacted.append((key, _mask(value)))
        else:
            redacted.append((key, value))
    return redacted


def truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]
