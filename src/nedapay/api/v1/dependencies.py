"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from nedapay.core.settings import settings
from nedapay.db.session import get_db
from nedapay.models import User
from nedapay.services.challenge_auth import ChallengeAuthenticator
from nedapay.services.user_directory import UserDirectory

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

_CREDENTIALS_ERROR = "Could not validate credentials"


def get_user_directory(db: SessionDep) -> UserDirectory:
    return UserDirectory(db)


def get_challenge_authenticator(request: Request) -> ChallengeAuthenticator:
    """Return the authenticator owned by the running application."""
    authenticator: ChallengeAuthenticator = request.app.state.challenge_authenticator
    return authenticator


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> User:
    """Get the current authenticated user from a JWT bearer token.

    Raises:
        HTTPException: If the token is missing or invalid, or the user no longer exists.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_CREDENTIALS_ERROR,
        ) from err

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_CREDENTIALS_ERROR,
        ) from err

    user = directory.get_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type aliases for injected collaborators
UserDirectoryDep = Annotated[UserDirectory, Depends(get_user_directory)]
AuthenticatorDep = Annotated[ChallengeAuthenticator, Depends(get_challenge_authenticator)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
