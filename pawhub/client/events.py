"""Parsing of realtime feed socket payloads."""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..schemas import RealtimeEvent, realtime_event_adapter

logger = logging.getLogger(__name__)


def parse_event(payload: Any) -> RealtimeEvent | None:
    """Return the typed event, or ``None`` for control frames and unknown shapes."""

    if not isinstance(payload, dict):
        return payload if hasattr(payload, "seq") else None
    try:
        return realtime_event_adapter.validate_python(payload)
    except ValidationError:
        logger.debug("Ignoring realtime payload of type %r", payload.get("type"))
        return None


__all__ = ["parse_event"]
