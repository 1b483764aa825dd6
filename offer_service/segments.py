"""
User-segment lookup.

The segment service answers ``GET /api/v1/user_segment?user_id=<id>`` with
``{"segment": "<label>"}`` or a 404 when the user has no known segment.
Everything else is a lookup failure.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import httpx

from .errors import SegmentLookupError

logger = logging.getLogger(__name__)

SEGMENT_PATH = "/api/v1/user_segment"


class SegmentResolver(ABC):
    """Abstract base for user-segment lookups."""

    @abstractmethod
    def resolve(self, user_id: int) -> Optional[str]:
        """Segment label for the user, or None when the user has none."""
        ...

    def close(self) -> None:
        pass


class StaticSegmentResolver(SegmentResolver):
    """Dict-backed resolver for local runs and tests."""

    def __init__(self, segments: Optional[Dict[int, str]] = None):
        self.segments = dict(segments or {})

    def resolve(self, user_id: int) -> Optional[str]:
        return self.segments.get(user_id)


class HttpSegmentResolver(SegmentResolver):
    def __init__(self, base_url: str, timeout: float = 2.0, transport: Optional[httpx.BaseTransport] = None):
        self.client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def resolve(self, user_id: int) -> Optional[str]:
        try:
            response = self.client.get(SEGMENT_PATH, params={"user_id": user_id})
        except httpx.HTTPError as e:
            logger.warning("Segment lookup for user %s failed: %s", user_id, e)
            raise SegmentLookupError(f"Segment lookup failed for user {user_id}: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            logger.warning("Segment service returned %s for user %s", response.status_code, user_id)
            raise SegmentLookupError(
                f"Segment service returned {response.status_code} for user {user_id}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise SegmentLookupError(f"Malformed segment response for user {user_id}") from e

        segment = body.get("segment") if isinstance(body, dict) else None
        if not isinstance(segment, str):
            raise SegmentLookupError(f"Segment response for user {user_id} has no segment")
        return segment or None

    def close(self) -> None:
        self.client.close()
