"""Client-side half of the Stellar challenge-response login.

Wallet frontends request a challenge for a phone number, sign the exact
challenge text with the account's secret seed, and post the signature back.
"""

from __future__ import annotations

from typing import Any

import httpx

from nedapay.core.security import sign_message

DEFAULT_TIMEOUT_SECONDS = 10.0
AUTH_PATH = "/api/v1/stellar-auth"


class AuthClientError(RuntimeError):
    """Raised when the server rejects a step of the handshake."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StellarAuthClient:
    """Synchronous HTTP client for the challenge/verify endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if client is None and base_url is None:
            raise ValueError("Either base_url or client must be provided")
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url or "",
            timeout=httpx.Timeout(timeout),
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> StellarAuthClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _post(self, path: str, body: dict[str, str]) -> dict[str, Any]:
        try:
            response = self._client.post(f"{AUTH_PATH}{path}", json=body)
        except httpx.HTTPError as exc:
            raise AuthClientError(f"Request to {path} failed: {exc}") from exc

        try:
            data: dict[str, Any] = response.json()
        except ValueError:
            data = {}
        if response.is_error:
            detail = data.get("detail") or data.get("message") or response.reason_phrase
            raise AuthClientError(str(detail), status_code=response.status_code)
        if data.get("success") is False:
            raise AuthClientError(
                str(data.get("message", "Request was not successful")),
                status_code=response.status_code,
            )
        return data

    def request_challenge(self, phone_number: str) -> dict[str, Any]:
        """Ask the server for a challenge bound to the account behind `phone_number`."""
        return self._post("/challenge", {"phoneNumber": phone_number})

    @staticmethod
    def sign_challenge(challenge: str, secret_seed: str) -> str:
        """Sign the challenge text with a Stellar secret seed; returns base64."""
        return sign_message(secret_seed, challenge.encode("utf-8"))

    def verify_challenge(self, phone_number: str, challenge: str, signature: str) -> dict[str, Any]:
        return self._post(
            "/verify",
            {"phoneNumber": phone_number, "challenge": challenge, "signature": signature},
        )

    def authenticate(self, phone_number: str, secret_seed: str) -> dict[str, Any]:
        """Run the full handshake and return the server's verify payload."""
        challenge = self.request_challenge(phone_number)["challenge"]
        signature = self.sign_challenge(challenge, secret_seed)
        return self.verify_challenge(phone_number, challenge, signature)
