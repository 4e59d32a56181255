# wellness_api/repositories/user_repo.py
from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from wellness_api.models import User
from wellness_api.repositories.base import BaseRepository

class UserRepository(BaseRepository[User]):
    model = User

    # READS
    def get(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    # WRITES
    def create(self, *, email: str, name: str, password_hash: str, role: str = "user") -> User:
        user = User(email=email.lower(), name=name, password_hash=password_hash, role=role)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            # Re-raise a clean marker the service maps to Conflict
            raise ValueError("email_already_exists")

    def update_details(self, user: User, *, name: str | None = None, email: str | None = None) -> User:
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email.lower()
        try:
            return self.save(user)
        except IntegrityError:
            self.db.rollback()
            raise ValueError("email_already_exists")

    def set_password_hash(self, user: User, password_hash: str) -> User:
        user.password_hash = password_hash
        return self.save(user)

    def touch_login(self, user: User) -> User:
        user.last_login = datetime.now(timezone.utc)
        return self.save(user)

    def set_role(self, user_id: int, *, role: str) -> Optional[User]:
        """Change a user's role; the DB enum validates role values. No HTTP route exposes this."""
        user = self.get(user_id)
        if not user:
            return None
        user.role = role
        return self.save(user)

    def set_active(self, user_id: int, *, active: bool) -> Optional[User]:
        user = self.get(user_id)
        if not user:
            return None
        user.is_active = active
        return self.save(user)
