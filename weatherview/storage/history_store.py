"""Recent-search history and the one-time location consent flag."""

import json
import logging

from weatherview.storage.kv_store import Storage

logger = logging.getLogger(__name__)

HISTORY_KEY = "searchHistory"
CONSENT_KEY = "locationPrompted"
ANSWER_KEY = "locationAllowed"


class HistoryStore:
    """Most-recent-first list of unique city names, capped at `limit`."""

    def __init__(self, storage: Storage, limit: int = 5, key: str = HISTORY_KEY):
        self.storage = storage
        self.limit = limit
        self.key = key

    def load(self) -> list[str]:
        """Return persisted history; malformed content is discarded."""
        raw = self.storage.load(self.key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Discarding malformed search history: %r", raw[:80])
            return []
        if not isinstance(data, list) or not all(isinstance(c, str) for c in data):
            logger.warning("Discarding search history of unexpected shape")
            return []
        return _dedupe(data)[: self.limit]

    def record(self, city: str) -> list[str]:
        """Push a city to the front, drop its earlier occurrence, truncate, persist."""
        history = [city, *(c for c in self.load() if c != city)][: self.limit]
        self.storage.save(self.key, json.dumps(history))
        return history

    def clear(self) -> None:
        self.storage.delete(self.key)


class LocationConsent:
    """The one-time location decision, asked at most once per installation.

    `locationPrompted` marks that the question was settled. The answer
    itself is kept under `locationAllowed` so later lookups can proceed or
    refuse without asking again.
    """

    def __init__(
        self, storage: Storage, key: str = CONSENT_KEY, answer_key: str = ANSWER_KEY
    ):
        self.storage = storage
        self.key = key
        self.answer_key = answer_key

    def was_requested(self) -> bool:
        return self.storage.load(self.key) == "true"

    def allowed(self) -> bool | None:
        """The recorded answer, or None when none was stored."""
        answer = self.storage.load(self.answer_key)
        if answer is None:
            return None
        return answer == "true"

    def record(self, allowed: bool) -> None:
        self.storage.save(self.answer_key, "true" if allowed else "false")
        self.mark_requested()

    def mark_requested(self) -> None:
        self.storage.save(self.key, "true")


def _dedupe(cities: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for c in cities:
        if c not in seen:
            seen.add(c)
            result.append(c)
    return result
