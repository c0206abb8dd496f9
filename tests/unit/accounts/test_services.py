from __future__ import annotations

import pytest

from modules.accounts.dtos import AddressDTO, RegisterUserDTO, UpdateProfileDTO
from modules.accounts.exceptions import UserAlreadyExists, UserNotFound
from modules.accounts.models import UserRole
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.services import AccountService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return AccountService(repository=UserDjangoRepository())


def register_dto(**overrides):
    values = {
        "username": "carol",
        "email": "carol@example.com",
        "password": "pizza123",
        "name": "Carol",
    }
    values.update(overrides)
    return RegisterUserDTO(**values)


class TestRegister:
    def test_registers_customer_with_hashed_password(self, service):
        user = service.register(register_dto())
        assert user.role == UserRole.CUSTOMER
        assert not user.is_admin
        assert user.check_password("pizza123")
        assert user.password != "pizza123"
        assert user.default_address() is None

    def test_address_is_stored(self, service):
        user = service.register(
            register_dto(address=AddressDTO(street="1 Main", city="Delhi", phone="123"))
        )
        assert user.default_address() == {
            "street": "1 Main",
            "city": "Delhi",
            "state": "",
            "zip_code": "",
            "phone": "123",
        }

    def test_duplicate_email_case_insensitive(self, service, customer):
        with pytest.raises(UserAlreadyExists):
            service.register(register_dto(email="ALICE@example.com"))

    def test_duplicate_username(self, service, customer):
        with pytest.raises(UserAlreadyExists):
            service.register(register_dto(username="alice"))

    def test_short_password_rejected(self):
        with pytest.raises(ValueError):
            register_dto(password="12345")

    def test_create_admin(self, service):
        admin = service.create_admin(register_dto(username="boss", email="boss@example.com"))
        assert admin.is_admin
        assert admin.is_staff


class TestProfile:
    def test_partial_update(self, service, customer):
        user = service.update_profile(str(customer.id), UpdateProfileDTO(phone="111"))
        assert user.phone == "111"
        assert user.first_name == "Alice"
        assert user.city == "Bengaluru"

    def test_set_active(self, service, customer):
        assert service.set_active(str(customer.id), False).is_active is False

    def test_unknown_user(self, service):
        with pytest.raises(UserNotFound):
            service.get_user("0190a000-0000-7000-8000-000000000000")

    def test_list_customers_excludes_admins(self, service, customer, admin_user):
        assert service.list_customers() == [customer]
