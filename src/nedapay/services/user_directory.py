"""Lookup and enrolment of wallet holders."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from nedapay.core.security import is_valid_public_key
from nedapay.models import User

logger = logging.getLogger(__name__)


class UserAlreadyExistsError(ValueError):
    """Raised when a phone number or Stellar key is already enrolled."""


class UserDirectory:
    """Resolves phone numbers to users and their Stellar public keys."""

    def __init__(self, db: Session) -> None:
        self._db = db

    @staticmethod
    def normalize_phone(phone_number: str) -> str:
        return phone_number.strip()

    def get_by_phone(self, phone_number: str) -> User | None:
        phone = self.normalize_phone(phone_number)
        return self._db.query(User).filter(User.phone_number == phone).first()

    def get_by_id(self, user_id: int) -> User | None:
        return self._db.get(User, user_id)

    def register(
        self,
        phone_number: str,
        stellar_public_key: str,
        display_name: str | None = None,
    ) -> User:
        """Enrol a new wallet holder.

        Raises:
            ValueError: If the phone number is blank or the key is not a Stellar public key.
            UserAlreadyExistsError: If the phone number or key is already enrolled.
        """
        phone = self.normalize_phone(phone_number)
        if not phone:
            raise ValueError("Phone number is required")
        public_key = stellar_public_key.strip()
        if not is_valid_public_key(public_key):
            raise ValueError("Invalid Stellar public key")

        if self.get_by_phone(phone) is not None:
            raise UserAlreadyExistsError("Phone number is already registered")
        if self._db.query(User).filter(User.stellar_public_key == public_key).first():
            raise UserAlreadyExistsError("Stellar account is already registered")

        user = User(phone_number=phone, stellar_public_key=public_key, display_name=display_name)
        self._db.add(user)
        try:
            self._db.commit()
        except IntegrityError as err:
            self._db.rollback()
            raise UserAlreadyExistsError("User is already registered") from err
        self._db.refresh(user)
        logger.info("Registered user %s for account %s", user.id, public_key)
        return user
