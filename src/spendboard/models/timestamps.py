"""Timestamp defaults shared by the table models."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current time; row timestamps are stored in UTC."""
    return datetime.now(timezone.utc)
