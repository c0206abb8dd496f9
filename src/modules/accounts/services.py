"""Account service layer (Use Cases).

Covers self-service registration and profile upkeep for customers, and
the back-office user operations exposed to admins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.accounts.exceptions import UserAlreadyExists, UserNotFound
from modules.accounts.models import User, UserRole

if TYPE_CHECKING:
    from modules.accounts.dtos import AddressDTO, RegisterUserDTO, UpdateProfileDTO
    from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class AccountService:
    """Application service for User use-cases."""

    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def register(self, dto: RegisterUserDTO, role: str = UserRole.CUSTOMER) -> User:
        """Create a user with the given role.

        Raises:
            UserAlreadyExists: username or email already taken.
        """
        log = logger.bind(username=dto.username, role=role)

        if self._repo.get_by_username(dto.username):
            log.warning("user.duplicate_username")
            raise UserAlreadyExists(f"Username '{dto.username}' already registered.")
        if self._repo.get_by_email(dto.email):
            log.warning("user.duplicate_email")
            raise UserAlreadyExists("User already exists with this email.")

        user = User(
            username=dto.username,
            email=dto.email,
            first_name=dto.name,
            phone=dto.phone,
            role=role,
            is_staff=role == UserRole.ADMIN,
        )
        user.set_password(dto.password)
        if dto.address is not None:
            _apply_address(user, dto.address)

        user = self._repo.save(user)
        log.info("user.registered", user_id=str(user.id))
        return user

    def create_admin(self, dto: RegisterUserDTO) -> User:
        return self.register(dto, role=UserRole.ADMIN)

    @transaction.atomic
    def update_profile(self, user_id: str, dto: UpdateProfileDTO) -> User:
        user = self.get_user(user_id)
        if dto.name is not None:
            user.first_name = dto.name
        if dto.phone is not None:
            user.phone = dto.phone
        if dto.address is not None:
            _apply_address(user, dto.address)
        user = self._repo.save(user)
        logger.info("user.profile_updated", user_id=str(user.id))
        return user

    @transaction.atomic
    def set_active(self, user_id: str, is_active: bool) -> User:
        """Activate or deactivate a user (inactive users cannot order)."""
        user = self.get_user(user_id)
        user.is_active = is_active
        user = self._repo.save(user)
        logger.info("user.status_updated", user_id=str(user.id), is_active=is_active)
        return user

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User:
        """Raises ``UserNotFound`` when no user matches."""
        return self._repo.require(user_id, UserNotFound)

    def list_customers(self) -> List[User]:
        return self._repo.list({"role": UserRole.CUSTOMER})


def _apply_address(user: User, address: AddressDTO) -> None:
    user.street = address.street
    user.city = address.city
    user.state = address.state
    user.zip_code = address.zip_code
    if address.phone:
        user.phone = address.phone
