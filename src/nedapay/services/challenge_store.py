"""Storage backends for outstanding authentication challenges."""

from __future__ import annotations

import json
import logging
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import datetime, timedelta
from threading import RLock
from typing import Any, Protocol

import redis

from nedapay.core.settings import Settings
from nedapay.db.time import utcnow

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 10_000
REDIS_LOCK_TIMEOUT_SECONDS = 5.0
# Redis keeps a record a little past its expiry so verification can still
# report CHALLENGE_EXPIRED rather than NO_ACTIVE_CHALLENGE. Such records
# are not counted as outstanding.
REDIS_EXPIRY_GRACE = timedelta(seconds=60)


@dataclass(frozen=True)
class ChallengeRecord:
    """A single outstanding challenge issued to one account."""

    account_id: str
    challenge_text: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Return True once `now` is strictly past the expiry instant."""
        return now > self.expires_at

    def to_json(self) -> str:
        return json.dumps(
            {
                "account_id": self.account_id,
                "challenge": self.challenge_text,
                "issued_at": self.issued_at.isoformat(),
                "expires_at": self.expires_at.isoformat(),
            }
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> ChallengeRecord:
        data = json.loads(raw)
        return cls(
            account_id=data["account_id"],
            challenge_text=data["challenge"],
            issued_at=datetime.fromisoformat(data["issued_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )


class ChallengeStore(Protocol):
    """Keyed collection holding at most one challenge per account."""

    def locked(self, account_id: str) -> AbstractContextManager[Any]:
        """Return a context manager serializing access to `account_id`'s record."""
        ...

    def get(self, account_id: str) -> ChallengeRecord | None: ...

    def put(self, record: ChallengeRecord) -> None: ...

    def delete(self, account_id: str) -> None: ...

    def purge_expired(self, now: datetime) -> int: ...

    def __len__(self) -> int: ...


class InMemoryChallengeStore:
    """Process-local store guarded by a single mutex.

    Expired records are swept when the store reaches capacity; if it is still
    full afterwards the oldest issued record is evicted.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._records: dict[str, ChallengeRecord] = {}
        self._lock = RLock()

    def locked(self, account_id: str) -> AbstractContextManager[Any]:
        # One lock for the whole map; every operation here is short and CPU-bound.
        return self._lock

    def get(self, account_id: str) -> ChallengeRecord | None:
        with self._lock:
            return self._records.get(account_id)

    def put(self, record: ChallengeRecord) -> None:
        with self._lock:
            # Re-inserting moves the account to the newest position.
            self._records.pop(record.account_id, None)
            if len(self._records) >= self._max_entries:
                self.purge_expired(record.issued_at)
            while len(self._records) >= self._max_entries:
                evicted = next(iter(self._records))
                del self._records[evicted]
                logger.warning("Challenge store full; evicted challenge for %s", evicted)
            self._records[record.account_id] = record

    def delete(self, account_id: str) -> None:
        with self._lock:
            self._records.pop(account_id, None)

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [key for key, rec in self._records.items() if rec.is_expired(now)]
            for key in expired:
                del self._records[key]
        if expired:
            logger.debug("Purged %d expired challenges", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class RedisChallengeStore:
    """Store shared between worker processes, backed by Redis key expiry."""

    def __init__(
        self,
        client: redis.Redis,
        *,
        key_prefix: str = "challenge",
        lock_timeout: float = REDIS_LOCK_TIMEOUT_SECONDS,
    ) -> None:
        self._redis = client
        self._key_prefix = key_prefix
        self._lock_timeout = lock_timeout

    def _key(self, account_id: str) -> str:
        return f"{self._key_prefix}:{account_id}"

    def locked(self, account_id: str) -> AbstractContextManager[Any]:
        return self._redis.lock(
            f"{self._key_prefix}-lock:{account_id}",
            timeout=self._lock_timeout,
            blocking_timeout=self._lock_timeout,
        )

    def get(self, account_id: str) -> ChallengeRecord | None:
        raw = self._redis.get(self._key(account_id))
        if raw is None:
            return None
        return ChallengeRecord.from_json(raw)

    def put(self, record: ChallengeRecord) -> None:
        lifetime = record.expires_at - record.issued_at + REDIS_EXPIRY_GRACE
        ttl_ms = max(1, int(lifetime.total_seconds() * 1000))
        self._redis.set(self._key(record.account_id), record.to_json(), px=ttl_ms)

    def delete(self, account_id: str) -> None:
        self._redis.delete(self._key(account_id))

    def purge_expired(self, now: datetime) -> int:
        # Redis expires keys on its own.
        return 0

    def __len__(self) -> int:
        now = utcnow()
        count = 0
        for key in self._redis.scan_iter(match=f"{self._key_prefix}:*"):
            raw = self._redis.get(key)
            # The key may have expired between the scan and the read.
            if raw is not None and not ChallengeRecord.from_json(raw).is_expired(now):
                count += 1
        return count


def build_challenge_store(config: Settings) -> ChallengeStore:
    """Return the challenge store selected by `CHALLENGE_STORE_BACKEND`."""
    if config.challenge_store_backend == "redis":
        logger.info("Using Redis challenge store at %s", config.redis_url)
        return RedisChallengeStore(redis.from_url(config.redis_url))
    return InMemoryChallengeStore(max_entries=config.challenge_max_outstanding)
