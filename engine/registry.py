"""Process-wide store of active matches with per-match serialization."""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from config import MAZE_MAX_SIZE, MAZE_MIN_SIZE
from engine.errors import MatchNotFoundError
from engine.match import create_match, match_summary
from models.match import Match, MatchMode, MatchSummary

logger = logging.getLogger(__name__)


def clamp_size(size: int) -> int:
    """Clamp a requested maze side into the allowed range."""
    return min(max(size, MAZE_MIN_SIZE), MAZE_MAX_SIZE)


class MatchRegistry:
    """Keyed store of matches owned by the hosting process.

    The engine does no locking of its own. Callers that mutate a match
    must do so inside ``locked(match_id)`` so that two requests for the
    same match never interleave.
    """

    def __init__(self) -> None:
        self._matches: dict[str, Match] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        return len(self._matches)

    def __contains__(self, match_id: object) -> bool:
        return match_id in self._matches

    def create(
        self,
        mode: MatchMode | str,
        width: int,
        height: int,
        rng: random.Random | None = None,
    ) -> Match:
        """Create and store a match. Sizes are clamped, not rejected."""
        match = create_match(mode, clamp_size(width), clamp_size(height), rng=rng)
        with self._guard:
            self._matches[match.match_id] = match
            self._locks[match.match_id] = threading.Lock()
        return match

    def get(self, match_id: str) -> Match:
        """Look up a match.

        Raises:
            MatchNotFoundError: If no match has this id.
        """
        match = self._matches.get(match_id)
        if match is None:
            raise MatchNotFoundError(f"Match '{match_id}' not found")
        return match

    @contextmanager
    def locked(self, match_id: str) -> Iterator[Match]:
        """Hold the match's lock for the duration of the block."""
        with self._guard:
            lock = self._locks.get(match_id)
        if lock is None:
            raise MatchNotFoundError(f"Match '{match_id}' not found")
        with lock:
            yield self.get(match_id)

    def remove(self, match_id: str) -> Match:
        """Destroy a match.

        Raises:
            MatchNotFoundError: If no match has this id.
        """
        with self._guard:
            match = self._matches.pop(match_id, None)
            self._locks.pop(match_id, None)
        if match is None:
            raise MatchNotFoundError(f"Match '{match_id}' not found")
        logger.info("Removed match %s", match_id)
        return match

    def list_matches(self) -> list[Match]:
        """All stored matches, newest first."""
        with self._guard:
            matches = list(self._matches.values())
        return sorted(matches, key=lambda m: m.created_at, reverse=True)

    def summaries(self) -> list[MatchSummary]:
        """History entries for all matches, newest first.

        Each summary is taken under that match's lock, so it never shows
        a half-resolved action. Matches removed meanwhile are skipped.
        """
        summaries = []
        for match in self.list_matches():
            try:
                with self.locked(match.match_id) as locked_match:
                    summaries.append(match_summary(locked_match))
            except MatchNotFoundError:
                continue
        return summaries
