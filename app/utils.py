"""
Miscelaneous utilities.
"""

import re
import time
from datetime import datetime
from functools import wraps
from typing import Callable, Optional

from unidecode import unidecode

from app.logger import logger


def timed(func) -> Callable:
    @wraps(func)
    async def timed_func(*args, **kwargs):
        init = time.perf_counter()
        out = await func(*args, **kwargs)
        end = time.perf_counter() - init
        logger.info(f"{func.__name__} finished in {1000 * end:.2f} ms")
        return out
    return timed_func


def clean_string(string: Optional[str]) -> str:
    if string is None:
        return ""
    string = unidecode(string).lower()
    return re.sub(r"[^\x00-\x7F]", "", string)


def now_ms() -> int:
    return int(time.time() * 1000)


def format_timestamp(timestamp: int, now: Optional[int] = None) -> str:
    """Human friendly age of an epoch-millisecond timestamp, e.g. '5m ago'."""
    now = now_ms() if now is None else now
    diff_ms = now - timestamp
    diff_mins = diff_ms // 60_000
    diff_hours = diff_ms // 3_600_000
    diff_days = diff_ms // 86_400_000

    if diff_mins < 60:
        return f"{diff_mins}m ago"
    if diff_hours < 24:
        return f"{diff_hours}h ago"
    if diff_days < 7:
        return f"{diff_days}d ago"
    return datetime.fromtimestamp(timestamp / 1000).date().isoformat()
