"""
Helpers/logger.py
Centralized logging: prints to console AND queues messages for a Discord webhook.

Usage:
    from Helpers.logger import log, SYSTEM, SUCCESS, INFO, WARN, ERROR

    log(INFO, "Something happened")
    log(ERROR, "Uh oh", context="relay")
"""

import datetime
import threading
import time
from datetime import timezone
from collections import deque

import requests

from Helpers.variables import LOG_BATCH_CHARS, LOG_FLUSH_SECONDS, LOG_USERNAME

# ---------------------------------------------------------------------------
# Log levels (colored-square prefixes)
# ---------------------------------------------------------------------------
SYSTEM  = "🟪"   # Lifecycle: startup, configuration, shutdown
SUCCESS = "🟩"   # Operation completed
INFO    = "🟦"   # General info, cache refreshes
WARN    = "🟨"   # Non-critical warnings
ERROR   = "🟥"   # Errors, rejected reports, failures

# ---------------------------------------------------------------------------
# Internal state
# ---------------------------------------------------------------------------
_queue: deque = deque()
_webhook_url = None
_flush_thread = None

TRUNCATED = " …(truncated)"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def init(webhook_url):
    """Store the Discord webhook that receives log lines. ``None`` disables shipping."""
    global _webhook_url
    _webhook_url = webhook_url
    if webhook_url is None:
        _queue.clear()


def start():
    """Begin the background flush loop. Call once at startup."""
    global _flush_thread
    if _flush_thread is None and _webhook_url:
        _flush_thread = threading.Thread(target=_flush_loop, name="log-flush", daemon=True)
        _flush_thread.start()


def log(level: str, message: str, *, context: str | None = None):
    """
    Log a message to the console and queue it for the Discord webhook.

    Parameters
    ----------
    level : str
        One of SYSTEM, SUCCESS, INFO, WARN, ERROR.
    message : str
        The log message.
    context : str, optional
        Module or component name shown as ``[context]``.
    """
    now = datetime.datetime.now(timezone.utc).strftime("%H:%M:%S")
    ctx = f"[{context}] " if context else ""

    # Console
    print(f"{level} {ctx}{message}", flush=True)

    # Discord queue
    if _webhook_url:
        _queue.append(f"{level} `{now}` {ctx}{message}")


# ---------------------------------------------------------------------------
# Background flush
# ---------------------------------------------------------------------------

def _flush_loop():
    """Periodically send queued log lines to the Discord webhook."""
    while True:
        try:
            flush()
        except Exception as e:
            # requests errors quote the URL, which holds the webhook token
            print(f"{WARN} [logger] flush failed: {type(e).__name__}", flush=True)
        time.sleep(LOG_FLUSH_SECONDS)


def _next_batch() -> str:
    batch = ""
    while _queue:
        line = _queue[0]
        # +1 for the newline
        if batch and len(batch) + len(line) + 1 > LOG_BATCH_CHARS:
            break
        _queue.popleft()
        if batch:
            batch += "\n"
        if len(line) > LOG_BATCH_CHARS:
            line = line[:LOG_BATCH_CHARS - len(TRUNCATED)] + TRUNCATED
        batch += line
    return batch


def flush():
    if not _webhook_url or not _queue:
        return

    while _queue:
        batch = _next_batch()
        if batch:
            resp = requests.post(
                _webhook_url,
                json={"username": LOG_USERNAME, "content": batch},
                timeout=10,
            )
            resp.raise_for_status()
