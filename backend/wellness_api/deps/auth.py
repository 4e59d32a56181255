# wellness_api/deps/auth.py
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from wellness_api.db import get_db
from wellness_api.models import User
from wellness_api.services.credentials import CredentialService

# Exposes Bearer auth in Swagger; missing headers are reported by the service,
# not by FastAPI, so every 401 carries the same envelope.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
) -> User:
    return CredentialService(db).verify_token(token)

def get_optional_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
) -> Optional[User]:
    """Identity if a valid token is present, otherwise None. Never fails."""
    return CredentialService(db).optional_identity(token)
