"""Challenge-response authentication for Stellar account holders.

A client proves possession of its account key by signing a one-time challenge:

1. ``issue_challenge`` stores a fresh challenge for the account, replacing any
   previous one.
2. ``verify_challenge`` checks the presented challenge and signature. Success
   consumes the challenge; an expired challenge is discarded; a mismatched
   challenge or bad signature leaves it in place for a corrected retry.

The full challenge string is signed and compared verbatim. Its parts are never
parsed back out.
"""

from __future__ import annotations

import base64
import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from enum import Enum

from nedapay.core.security import verify_signature
from nedapay.core.settings import Settings
from nedapay.db.time import utcnow
from nedapay.services.challenge_store import (
    ChallengeRecord,
    ChallengeStore,
    InMemoryChallengeStore,
    build_challenge_store,
)

logger = logging.getLogger(__name__)

NONCE_BYTES = 32
DEFAULT_TTL = timedelta(minutes=5)
DEFAULT_PREFIX = "iTZS-auth"


class VerificationOutcome(Enum):
    """Result of a single ``verify_challenge`` call."""

    SUCCESS = "success"
    NO_ACTIVE_CHALLENGE = "no_active_challenge"
    CHALLENGE_EXPIRED = "challenge_expired"
    CHALLENGE_MISMATCH = "challenge_mismatch"
    INVALID_SIGNATURE = "invalid_signature"

    @property
    def ok(self) -> bool:
        return self is VerificationOutcome.SUCCESS


class ChallengeAuthenticator:
    """Issues and verifies single-use, time-boxed challenges per account."""

    def __init__(
        self,
        store: ChallengeStore | None = None,
        *,
        ttl: timedelta = DEFAULT_TTL,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("Challenge TTL must be positive")
        self._store = store if store is not None else InMemoryChallengeStore()
        self._ttl = ttl
        self._prefix = prefix
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def _compose_challenge(self, issued_at: datetime) -> str:
        nonce = base64.b64encode(secrets.token_bytes(NONCE_BYTES)).decode()
        issued_ms = int(issued_at.timestamp() * 1000)
        return f"{self._prefix}-{nonce}-{issued_ms}"

    def issue_challenge(self, account_id: str) -> ChallengeRecord:
        """Create and store a new challenge for `account_id`.

        Any challenge previously issued to the account becomes unverifiable.

        Raises:
            ValueError: If `account_id` is empty.
        """
        if not account_id or not account_id.strip():
            raise ValueError("Account identifier must be provided")

        issued_at = self._clock()
        record = ChallengeRecord(
            account_id=account_id,
            challenge_text=self._compose_challenge(issued_at),
            issued_at=issued_at,
            expires_at=issued_at + self._ttl,
        )
        with self._store.locked(account_id):
            self._store.put(record)
        logger.debug("Issued challenge for %s expiring at %s", account_id, record.expires_at)
        return record

    def verify_challenge(
        self,
        account_id: str,
        presented_challenge: str,
        signature: bytes | str,
        public_key: str,
    ) -> VerificationOutcome:
        """Check a signed challenge for `account_id`.

        Args:
            account_id: Account the challenge was issued to.
            presented_challenge: Challenge text the client claims to have signed.
            signature: Raw signature bytes or their base64 encoding.
            public_key: Stellar public key belonging to `account_id`.

        Returns:
            The outcome; only ``VerificationOutcome.SUCCESS`` authenticates.
        """
        with self._store.locked(account_id):
            record = self._store.get(account_id)
            if record is None:
                logger.info("No active challenge for %s", account_id)
                return VerificationOutcome.NO_ACTIVE_CHALLENGE

            if record.is_expired(self._clock()):
                self._store.delete(account_id)
                logger.info("Challenge for %s has expired", account_id)
                return VerificationOutcome.CHALLENGE_EXPIRED

            if not secrets.compare_digest(
                presented_challenge.encode("utf-8", "surrogatepass"),
                record.challenge_text.encode("utf-8", "surrogatepass"),
            ):
                logger.warning("Challenge mismatch for %s", account_id)
                return VerificationOutcome.CHALLENGE_MISMATCH

            message = record.challenge_text.encode("utf-8")
            if not verify_signature(public_key, message, signature):
                logger.warning("Invalid challenge signature for %s", account_id)
                return VerificationOutcome.INVALID_SIGNATURE

            self._store.delete(account_id)

        logger.info("Challenge verified for %s", account_id)
        return VerificationOutcome.SUCCESS

    def peek(self, account_id: str) -> ChallengeRecord | None:
        """Return the live challenge for `account_id`, purging it if expired."""
        with self._store.locked(account_id):
            record = self._store.get(account_id)
            if record is not None and record.is_expired(self._clock()):
                self._store.delete(account_id)
                return None
            return record

    def purge_expired(self) -> int:
        """Remove every expired challenge and return how many were dropped."""
        return self._store.purge_expired(self._clock())

    def outstanding(self) -> int:
        """Return the number of challenges currently held by the store."""
        return len(self._store)


def build_challenge_authenticator(config: Settings) -> ChallengeAuthenticator:
    """Construct the authenticator described by application settings."""
    return ChallengeAuthenticator(
        build_challenge_store(config),
        ttl=timedelta(seconds=config.challenge_ttl_seconds),
        prefix=config.challenge_prefix,
    )
