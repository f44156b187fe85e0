# src/nedapay/services/__init__.py
"""Business logic services for the NEDApay backend."""

from .challenge_auth import ChallengeAuthenticator, VerificationOutcome
from .challenge_store import ChallengeRecord, InMemoryChallengeStore, RedisChallengeStore
from .user_directory import UserAlreadyExistsError, UserDirectory

__all__ = [
    "ChallengeAuthenticator",
    "ChallengeRecord",
    "InMemoryChallengeStore",
    "RedisChallengeStore",
    "UserAlreadyExistsError",
    "UserDirectory",
    "VerificationOutcome",
]
