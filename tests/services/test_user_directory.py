"""Tests for the phone-number user directory."""

from __future__ import annotations

import pytest
from stellar_sdk import Keypair

from nedapay.services.user_directory import UserAlreadyExistsError, UserDirectory


def test_register_and_lookup(db_session, keypair) -> None:
    directory = UserDirectory(db_session)
    user = directory.register(" +255700000001 ", keypair.public_key, "Amina")

    assert user.id is not None
    assert user.phone_number == "+255700000001"
    assert directory.get_by_phone("+255700000001") == user
    assert directory.get_by_id(user.id) == user
    assert user.created_at is not None


def test_lookup_unknown(db_session) -> None:
    directory = UserDirectory(db_session)
    assert directory.get_by_phone("+255000000000") is None
    assert directory.get_by_id(9999) is None


def test_register_duplicate_phone(db_session, keypair) -> None:
    directory = UserDirectory(db_session)
    directory.register("+255700000002", keypair.public_key)

    with pytest.raises(UserAlreadyExistsError):
        directory.register("+255700000002", Keypair.random().public_key)


def test_register_duplicate_key(db_session, keypair) -> None:
    directory = UserDirectory(db_session)
    directory.register("+255700000003", keypair.public_key)

    with pytest.raises(UserAlreadyExistsError):
        directory.register("+255700000004", keypair.public_key)


@pytest.mark.parametrize("public_key", ["", "GNOTAKEY", Keypair.random().secret])
def test_register_rejects_invalid_key(db_session, public_key) -> None:
    with pytest.raises(ValueError, match="Invalid Stellar public key"):
        UserDirectory(db_session).register("+255700000005", public_key)


def test_register_rejects_blank_phone(db_session, keypair) -> None:
    with pytest.raises(ValueError, match="Phone number is required"):
        UserDirectory(db_session).register("   ", keypair.public_key)
