"""Enrol the demo wallet holders with freshly generated Stellar keypairs.

Secret seeds are printed once so they can be loaded into the demo clients;
they are never stored by the backend.
"""
from __future__ import annotations

import argparse
import sys

from stellar_sdk import Keypair

from nedapay.db.session import SessionLocal, create_tables
from nedapay.services.user_directory import UserAlreadyExistsError, UserDirectory

DEMO_PHONE_NUMBERS = (
    "+255123456789",
    "+255987654321",
    "+255111222333",
    "+255444555666",
    "+255777888999",
)


def seed(phone_numbers: tuple[str, ...] | list[str]) -> list[tuple[str, str, str]]:
    """Register each phone number; returns (phone, public_key, secret) for new users."""
    create_tables()
    created: list[tuple[str, str, str]] = []
    with SessionLocal() as db:
        directory = UserDirectory(db)
        for phone in phone_numbers:
            keypair = Keypair.random()
            try:
                directory.register(phone, keypair.public_key)
            except UserAlreadyExistsError:
                print(f"[seed] {phone} already registered, skipping")
                continue
            created.append((phone, keypair.public_key, keypair.secret))
    return created


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "phones",
        nargs="*",
        help="Phone numbers to enrol (defaults to the demo set)",
    )
    args = parser.parse_args(argv)

    created = seed(args.phones or DEMO_PHONE_NUMBERS)
    for phone, public_key, secret in created:
        print(f"{phone}\t{public_key}\t{secret}")
    print(f"[seed] Registered {len(created)} user(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
