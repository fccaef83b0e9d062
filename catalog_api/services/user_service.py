"""
User management service: creation, retrieval, update, deactivation and removal.

Business rules enforced here (on top of the endpoint role checks):
- Auxiliares can only see and edit their own account.
- Coordinadores never see or edit admin accounts.
- Only admins change roles or the active flag.
- Admins cannot demote, deactivate or delete a different admin account.
"""
import sqlite3
from typing import Optional
import logging

from catalog_api.core.config import TokenConfig
from catalog_api.core.exceptions import (
    DuplicateKeyError,
    ForbiddenError,
    NotFoundError,
)
from catalog_api.core.permissions import (
    can_access_user,
    can_change_role,
    can_remove_user,
    enforce,
)
from catalog_api.core.security import PasswordHasher
from catalog_api.models.identity import Identity
from catalog_api.models.user import User, UserRole
from catalog_api.repositories.user_repository import UserRepository
from catalog_api.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, conn: sqlite3.Connection, config: TokenConfig) -> None:
        logger.trace("Initializing UserService")
        self._repo = UserRepository(conn)
        self._hasher = PasswordHasher(config)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _load(self, user_id: int) -> User:
        user = self._repo.get_by_id(user_id)
        if not user:
            logger.warning("User id=%s not found", user_id)
            raise NotFoundError("User not found")
        return user

    def _load_visible(self, identity: Identity, user_id: int) -> User:
        """Load *user_id* and apply the directory visibility rules."""
        # Answer auxiliares before the lookup so a 403/404 split cannot be
        # used to probe which ids exist.
        if identity.role == UserRole.AUXILIAR and not identity.is_subject(user_id):
            logger.warning(
                "Auxiliar subject=%s requested user id=%s", identity.subject_id, user_id
            )
            raise ForbiddenError("You can only access your own account")
        target = self._load(user_id)
        enforce(can_access_user(identity, target), identity)
        return target

    def get_user(self, identity: Identity, user_id: int) -> User:
        logger.info("Fetching user id=%s for subject=%s", user_id, identity.subject_id)
        return self._load_visible(identity, user_id)

    def get_profile(self, identity: Identity) -> User:
        """Live account record of the caller."""
        user = self._repo.get_by_id(identity.subject_id)
        if not user or not user.is_active:
            logger.warning("Profile for subject=%s missing or inactive", identity.subject_id)
            raise NotFoundError("User not found")
        return user

    def list_users(self, identity: Identity, include_inactive: bool = False) -> list[User]:
        logger.info(
            "Listing users for subject=%s include_inactive=%s",
            identity.subject_id,
            include_inactive,
        )
        if identity.role == UserRole.AUXILIAR:
            return self._repo.list_all(include_inactive, only_id=identity.subject_id)
        if identity.role == UserRole.COORDINADOR:
            return self._repo.list_all(include_inactive, exclude_role=UserRole.ADMIN)
        return self._repo.list_all(include_inactive)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_user(self, data: UserCreate) -> User:
        """
        Persist a new account. The password is hashed here, before the row is
        written; the plaintext never reaches the repository.
        """
        role = data.requested_role or UserRole.AUXILIAR
        logger.info("Creating user %s with role %s", data.username, role.value)

        if self._repo.get_by_username(data.username):
            logger.warning("Duplicate username registration attempt: %s", data.username)
            raise DuplicateKeyError("Username is already taken")
        if self._repo.get_by_email(data.email):
            logger.warning("Duplicate email registration attempt: %s", data.email)
            raise DuplicateKeyError("Email is already registered")

        try:
            user = self._repo.create(
                username=data.username,
                email=data.email,
                hashed_password=self._hasher.hash(data.password),
                role=role,
            )
        except sqlite3.IntegrityError:
            logger.warning("User insert hit a unique constraint: %s", data.username)
            raise DuplicateKeyError("Username or email already exists")
        logger.info("User created id=%s", user.id)
        return user

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_user(self, identity: Identity, user_id: int, data: UserUpdate) -> User:
        logger.info("Updating user id=%s by subject=%s", user_id, identity.subject_id)
        target = self._load_visible(identity, user_id)

        if identity.role != UserRole.ADMIN and (
            data.role is not None or data.is_active is not None
        ):
            logger.warning(
                "Subject=%s attempted to change role/active flag of user id=%s",
                identity.subject_id,
                user_id,
            )
            raise ForbiddenError("Only admins can change roles or account status")

        updates: dict = {}

        if data.username is not None and data.username != target.username:
            existing = self._repo.get_by_username(data.username)
            if existing and existing.id != user_id:
                raise DuplicateKeyError("Username is already taken")
            updates["username"] = data.username

        if data.email is not None and data.email != target.email:
            existing = self._repo.get_by_email(data.email)
            if existing and existing.id != user_id:
                logger.warning("Duplicate email update attempt: %s", data.email)
                raise DuplicateKeyError("Email is already registered")
            updates["email"] = data.email

        if data.password is not None:
            updates["hashed_password"] = self._hasher.hash(data.password)

        if data.role is not None and data.role != target.role:
            enforce(can_change_role(identity, target, data.role), identity)
            updates["role"] = data.role.value

        if data.is_active is not None:
            if not data.is_active:
                enforce(can_remove_user(identity, target), identity)
            updates["is_active"] = int(data.is_active)

        try:
            updated = self._repo.update(user_id, **updates)
        except sqlite3.IntegrityError:
            raise DuplicateKeyError("Username or email already exists")
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("User updated id=%s", user_id)
        return updated

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def deactivate_user(self, identity: Identity, user_id: int) -> User:
        target = self._load(user_id)
        enforce(can_remove_user(identity, target), identity)
        updated = self._repo.update(user_id, is_active=0)
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("User deactivated id=%s by subject=%s", user_id, identity.subject_id)
        return updated

    def reactivate_user(self, identity: Identity, user_id: int) -> User:
        self._load(user_id)
        updated = self._repo.update(user_id, is_active=1)
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("User reactivated id=%s by subject=%s", user_id, identity.subject_id)
        return updated

    def delete_user(self, identity: Identity, user_id: int) -> User:
        """Permanently remove an account; returns the removed record."""
        target = self._load(user_id)
        enforce(can_remove_user(identity, target), identity)
        if not self._repo.delete(user_id):
            raise NotFoundError("User not found")
        logger.info("User deleted id=%s by subject=%s", user_id, identity.subject_id)
        return target

    def find_for_login(self, login_key: str) -> Optional[User]:
        return self._repo.get_by_login(login_key)

    def verify_password(self, user: User, password: str) -> bool:
        return self._hasher.verify(password, user.hashed_password)

    def dummy_verify(self) -> None:
        self._hasher.dummy_verify()
