"""Signature and session-token utilities built on Stellar keypairs."""
from __future__ import annotations

import base64
import binascii
from datetime import timedelta

from jose import jwt
from stellar_sdk import Keypair, StrKey
from stellar_sdk.exceptions import BadSignatureError

from nedapay.core.settings import settings
from nedapay.db.time import utcnow


def is_valid_public_key(public_key: str) -> bool:
    """Return True if `public_key` is a well-formed Stellar `G...` account key."""
    return StrKey.is_valid_ed25519_public_key(public_key)


def decode_signature(signature: bytes | str) -> bytes:
    """Return raw signature bytes, decoding the base64 transport form if needed.

    Raises:
        ValueError: If a string signature is not valid base64.
    """
    if isinstance(signature, bytes):
        return signature
    try:
        return base64.b64decode(signature, validate=True)
    except binascii.Error as err:
        raise ValueError(f"Invalid base64 signature: {err}") from err


def verify_signature(public_key: str, message: bytes, signature: bytes | str) -> bool:
    """Verify an Ed25519 signature made by a Stellar account key.

    Args:
        public_key: StrKey-encoded Stellar public key (`G...`).
        message: Exact bytes that were signed on the client.
        signature: Raw 64-byte signature, or its base64 encoding.

    Returns:
        True if the signature is valid for `message` under `public_key`; False otherwise,
        including when the key or signature is malformed.
    """
    try:
        keypair = Keypair.from_public_key(public_key)
        keypair.verify(message, decode_signature(signature))
        return True
    except (BadSignatureError, ValueError, TypeError):
        return False


def sign_message(secret_seed: str, message: bytes) -> str:
    """Sign `message` with a Stellar secret seed (`S...`) and return base64."""
    try:
        keypair = Keypair.from_secret(secret_seed)
    except ValueError as err:
        raise ValueError(f"Invalid Stellar secret seed: {err}") from err
    return base64.b64encode(keypair.sign(message)).decode()


def create_access_token(subject: str | int, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token for an authenticated wallet holder."""
    to_encode: dict[str, object] = {"sub": str(subject)}
    if extra_claims:
        to_encode.update(extra_claims)
    to_encode["exp"] = utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt
