"""Credential Service: registration, login, bearer tokens, account details."""
from __future__ import annotations

import logging
from typing import Optional

from jose.exceptions import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from wellness_api.errors import Conflict, Unauthorized
from wellness_api.models import User
from wellness_api.repositories.user_repo import UserRepository
from wellness_api.security import create_access_token, decode_token, hash_password, verify_password

log = logging.getLogger(__name__)

# Same text for unknown email, wrong password and deactivated account
INVALID_CREDENTIALS = "Invalid credentials"


class CredentialService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def _issue(self, user: User) -> str:
        return create_access_token(sub=str(user.id))

    def register(self, *, email: str, password: str, name: str | None = None) -> tuple[str, User]:
        if self.users.get_by_email(email):
            raise Conflict("User already exists")
        try:
            user = self.users.create(
                email=email,
                name=name or email.split("@")[0],
                password_hash=hash_password(password),
            )
        except ValueError as e:
            if str(e) == "email_already_exists":
                raise Conflict("User already exists")
            raise
        user = self.users.touch_login(user)
        log.info("registered user id=%s", user.id)
        return self._issue(user), user

    def login(self, *, email: str, password: str) -> tuple[str, User]:
        user = self.users.get_by_email(email)
        if not user or not user.is_active or not verify_password(password, user.password_hash):
            log.warning("login rejected for %s", email)
            raise Unauthorized(INVALID_CREDENTIALS)
        user = self.users.touch_login(user)
        return self._issue(user), user

    def verify_token(self, token: str | None) -> User:
        if not token:
            raise Unauthorized("Not authorized to access this route")
        try:
            payload = decode_token(token)
        except ExpiredSignatureError:
            raise Unauthorized("Token expired")
        except JWTError:
            raise Unauthorized("Not authorized to access this route")
        sub = payload.get("sub")
        try:
            user_id = int(sub)
        except (TypeError, ValueError):
            raise Unauthorized("Not authorized to access this route")
        user = self.users.get(user_id)
        if not user or not user.is_active:
            raise Unauthorized("Not authorized to access this route")
        return user

    def optional_identity(self, token: str | None) -> Optional[User]:
        if not token:
            return None
        try:
            return self.verify_token(token)
        except Unauthorized:
            return None

    def update_details(self, user: User, *, name: str | None = None, email: str | None = None) -> User:
        if email is not None:
            other = self.users.get_by_email(email)
            if other and other.id != user.id:
                raise Conflict("Email already in use")
        try:
            return self.users.update_details(user, name=name, email=email)
        except ValueError as e:
            if str(e) == "email_already_exists":
                raise Conflict("Email already in use")
            raise

    def update_password(self, user: User, *, current_password: str, new_password: str) -> User:
        if not verify_password(current_password, user.password_hash):
            raise Unauthorized("Password is incorrect")
        log.info("password changed for user id=%s", user.id)
        return self.users.set_password_hash(user, hash_password(new_password))
