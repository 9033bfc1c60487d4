"""
MassBan - Logger Module
=======================

Tree-style console and file logging for a single run.

DESIGN:
    Every line goes to stdout and to a daily log file; error-level lines
    are copied to a separate error file so a failed run can be diagnosed
    without scrolling through per-command output.

    Layout on disk:
        LOG_DIR/
            2026-10-18/
                MassBan-2026-10-18.log
                MassBan-Errors-2026-10-18.log

    Dated folders older than LOG_RETENTION_DAYS are removed at startup.
    Structured output (config summary, pass results, error details) is
    rendered as ├─ / └─ branches. Errors with details can also be posted
    to a Discord webhook (ERROR_WEBHOOK_URL).
"""

import asyncio
import os
import shutil
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import aiohttp

from src.core.constants import LOG_RETENTION_DAYS


# =============================================================================
# Constants
# =============================================================================

DEFAULT_LOG_DIR = "logs"
"""Root folder for the dated log folders when LOG_DIR is unset."""

DEFAULT_LOG_TIMEZONE = "UTC"
"""Timezone for timestamps and folder dates when LOG_TIMEZONE is unset."""

LOG_PREFIX = "MassBan"

LEVEL_EMOJI = {
    "debug": "🔍",
    "info": "ℹ️",
    "success": "✅",
    "warning": "⚠️",
    "error": "❌",
    "critical": "🚨",
}

WEBHOOK_COLOR = 0xDC3545
WEBHOOK_TIMEOUT = 10
WEBHOOK_MAX_FIELDS = 25

Details = List[Tuple[str, str]]


def _branches(items: Iterable[Tuple[str, str]], indent: str = "  ") -> List[str]:
    """Render (key, value) pairs as tree branches, last one closed with └─."""
    items = list(items)
    lines = []
    for i, (key, value) in enumerate(items):
        branch = "└─" if i == len(items) - 1 else "├─"
        lines.append(f"{indent}{branch} {key}: {value}")
    return lines


# =============================================================================
# Tree Logger Class
# =============================================================================

class TreeLogger:
    """
    Run logger with tree formatting and a separate error file.

    Files are created by configure(), which main() calls once the .env file
    is loaded. Logging before that configures from the current environment.

    Attributes:
        run_id: Short random ID printed in the session header and webhook footer.
        tz: Timezone of timestamps and folder dates.
        log_dir: Today's folder under logs_dir.
        log_file: Main log file.
        error_file: Error-only log file.
    """

    def __init__(self, logs_dir: Optional[Path] = None, timezone: Optional[str] = None) -> None:
        self.run_id: str = uuid.uuid4().hex[:8]
        self.tz = ZoneInfo(DEFAULT_LOG_TIMEZONE)
        self.logs_dir: Optional[Path] = None
        self.log_dir: Optional[Path] = None
        self.log_file: Optional[Path] = None
        self.error_file: Optional[Path] = None
        self._webhook_url: Optional[str] = None
        self._webhook_tasks: Set[asyncio.Task] = set()

        if logs_dir is not None:
            self.configure(logs_dir, timezone)

    @property
    def configured(self) -> bool:
        return self.log_file is not None

    def configure(self, logs_dir: Optional[Path] = None, timezone: Optional[str] = None) -> None:
        """
        Resolve the log folder and timezone, then start today's log files.

        Args:
            logs_dir: Root of the dated folders; LOG_DIR or "logs" when None.
            timezone: IANA zone name; LOG_TIMEZONE or UTC when None. An
                unknown zone falls back to UTC with a warning.
        """
        tz_name = timezone or os.getenv("LOG_TIMEZONE") or DEFAULT_LOG_TIMEZONE
        try:
            self.tz = ZoneInfo(tz_name)
            bad_tz = False
        except (ZoneInfoNotFoundError, ValueError):
            self.tz = ZoneInfo(DEFAULT_LOG_TIMEZONE)
            bad_tz = True

        self.logs_dir = Path(logs_dir or os.getenv("LOG_DIR") or DEFAULT_LOG_DIR)
        today = datetime.now(self.tz).date().isoformat()
        self.log_dir = self.logs_dir / today
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / f"{LOG_PREFIX}-{today}.log"
        self.error_file = self.log_dir / f"{LOG_PREFIX}-Errors-{today}.log"

        self._remove_expired_folders()
        self._append(self.log_file, self._session_header())

        if bad_tz:
            self.warning(f"LOG_TIMEZONE='{tz_name}' invalid, using default {DEFAULT_LOG_TIMEZONE}")

    def set_webhook(self, url: Optional[str]) -> None:
        """Enable (or with None, disable) webhook alerts for error()."""
        self._webhook_url = url

    # =========================================================================
    # Files
    # =========================================================================

    def _remove_expired_folders(self) -> None:
        today = datetime.now(self.tz).date()
        removed = 0

        for folder in self.logs_dir.iterdir():
            if not folder.is_dir():
                continue
            try:
                folder_date = date.fromisoformat(folder.name)
            except ValueError:
                continue
            if (today - folder_date).days > LOG_RETENTION_DAYS:
                shutil.rmtree(folder)
                removed += 1

        if removed:
            print(f"[LOG CLEANUP] Removed {removed} log folder(s) older than {LOG_RETENTION_DAYS} days")

    def _session_header(self) -> str:
        rule = "=" * 60
        started = datetime.now(self.tz).strftime("%Y-%m-%d %I:%M:%S %p %Z")
        return f"\n{rule}\n{LOG_PREFIX.upper()} RUN - RUN ID: {self.run_id} - PID {os.getpid()}\n[{started}]\n{rule}\n"

    @staticmethod
    def _append(path: Path, text: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(text)

    # =========================================================================
    # Output
    # =========================================================================

    def _emit(self, title: str, level: str, extra: Iterable[str] = (), is_error: bool = False) -> None:
        """
        Print a timestamped title plus untimestamped continuation lines.

        Args:
            title: First line, prefixed with timestamp and emoji.
            level: Key into LEVEL_EMOJI, or an emoji itself.
            extra: Continuation lines (tree branches, tracebacks).
            is_error: Also copy everything to the error file.
        """
        if not self.configured:
            self.configure()

        stamp = datetime.now(self.tz).strftime("[%I:%M:%S %p %Z]")
        emoji = LEVEL_EMOJI.get(level, level)
        lines = [f"{stamp} {emoji} {title}" if emoji else f"{stamp} {title}", *extra]
        block = "\n".join(lines) + "\n"

        print(block, end="")
        self._append(self.log_file, block)
        if is_error:
            self._append(self.error_file, block)

    def tree(self, title: str, items: Details, emoji: str = "📦") -> None:
        """
        Log a titled list of key/value pairs.

        Example output:
            [02:30:45 PM UTC] 🔨 Ban Pass Complete
              ├─ Actioned: 12
              └─ Progress File: banned-users.txt
        """
        self._emit(title, emoji, _branches(items))

    def tree_nested(self, title: str, sections: List[Tuple[str, Details]], emoji: str = "📦") -> None:
        """Log a titled tree whose branches are sections of key/value pairs."""
        lines = []
        for i, (name, items) in enumerate(sections):
            last = i == len(sections) - 1
            lines.append(f"  {'└─' if last else '├─'} {name}")
            lines.extend(_branches(items, indent="     " if last else "  │  "))
        self._emit(title, emoji, lines)

    # =========================================================================
    # Levels
    # =========================================================================

    def debug(self, msg: str) -> None:
        if os.getenv("DEBUG"):
            self._emit(msg, "debug")

    def info(self, msg: str) -> None:
        self._emit(msg, "info")

    def success(self, msg: str) -> None:
        self._emit(msg, "success")

    def warning(self, msg: str) -> None:
        self._emit(msg, "warning")

    def critical(self, msg: str) -> None:
        self._emit(msg, "critical", is_error=True)

    def error(self, msg: str, details: Optional[Details] = None) -> None:
        """
        Log an error, optionally with a details tree.

        When details are given and a webhook is set, the alert is posted in
        the background. Outside a running event loop the webhook is skipped.

        Args:
            msg: Error title.
            details: (key, value) pairs shown under the title.
        """
        self._emit(msg, "error", _branches(details or []), is_error=True)

        if not (details and self._webhook_url):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self._send_webhook_error(msg, details))
        self._webhook_tasks.add(task)
        task.add_done_callback(self._webhook_tasks.discard)

    # =========================================================================
    # Webhook
    # =========================================================================

    def _webhook_payload(self, title: str, details: Details) -> dict:
        return {
            "embeds": [{
                "title": f"{LEVEL_EMOJI['error']} {title}"[:256],
                "color": WEBHOOK_COLOR,
                "fields": [
                    {"name": key[:256], "value": (value or "-")[:1024], "inline": False}
                    for key, value in details[:WEBHOOK_MAX_FIELDS]
                ],
                "timestamp": datetime.now(self.tz).isoformat(),
                "footer": {"text": f"Run ID: {self.run_id}"},
            }]
        }

    async def _send_webhook_error(self, title: str, details: Details) -> None:
        """Post an error embed. Delivery problems are printed, never raised."""
        if not self._webhook_url:
            return

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=WEBHOOK_TIMEOUT)) as session:
                async with session.post(self._webhook_url, json=self._webhook_payload(title, details)) as resp:
                    if resp.status not in (200, 204):
                        print(f"Webhook error: {resp.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"Failed to send webhook: {type(e).__name__}: {e}")

    async def drain(self) -> None:
        """Wait for webhook posts still in flight."""
        if self._webhook_tasks:
            await asyncio.gather(*self._webhook_tasks, return_exceptions=True)


# =============================================================================
# Global Instance
# =============================================================================

logger = TreeLogger()
"""Shared logger; every module imports this instance."""


__all__ = [
    "logger",
    "TreeLogger",
]
