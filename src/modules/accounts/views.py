"""Account API views.

Customers register and maintain their own profile; admins list customers,
toggle their active flag and create further admins.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import AddressDTO, RegisterUserDTO, UpdateProfileDTO
from modules.accounts.exceptions import UserAlreadyExists, UserNotFound
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.serializers import (
    RegisterSerializer,
    UpdateProfileSerializer,
    UserSerializer,
    UserStatusSerializer,
)
from modules.accounts.services import AccountService
from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsAdminRole


def _register_dto(data: dict) -> RegisterUserDTO:
    address = data.get("address")
    return RegisterUserDTO(
        username=data["username"],
        email=data["email"],
        password=data["password"],
        name=data.get("name", ""),
        phone=data.get("phone", ""),
        address=AddressDTO(**address) if address else None,
    )


class RegisterView(APIView):
    """POST /api/v1/auth/register/: public customer sign-up."""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = AccountService(repository=UserDjangoRepository())
        try:
            user = service.register(_register_dto(serializer.validated_data))
        except UserAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class ProfileView(APIView):
    """GET/PATCH /api/v1/auth/me/: the authenticated user's own profile."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(UserSerializer(request.user).data)

    def patch(self, request: Request) -> Response:
        serializer = UpdateProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        dto = UpdateProfileDTO(
            name=data.get("name"),
            phone=data.get("phone"),
            address=AddressDTO(**data["address"]) if data.get("address") else None,
        )
        service = AccountService(repository=UserDjangoRepository())
        user = service.update_profile(str(request.user.id), dto)
        return Response(UserSerializer(user).data)


class AdminUserViewSet(GenericViewSet):
    """Back-office user management (admin role only)."""

    permission_classes = [IsAdminRole]
    serializer_class = UserSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AccountService(repository=UserDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/users/"""
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(self._service.list_customers(), request)
        return paginator.get_paginated_response(UserSerializer(page, many=True).data)

    @action(detail=True, methods=["put", "patch"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/admin/users/{pk}/status/"""
        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            user = self._service.set_active(
                str(pk), serializer.validated_data["is_active"]
            )
        except UserNotFound:
            return Response(
                {"detail": "User not found."}, status=status.HTTP_404_NOT_FOUND
            )
        return Response(UserSerializer(user).data)

    @action(detail=False, methods=["post"], url_path="create-admin")
    def create_admin(self, request: Request) -> Response:
        """POST /api/v1/admin/users/create-admin/"""
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            admin = self._service.create_admin(_register_dto(serializer.validated_data))
        except UserAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(UserSerializer(admin).data, status=status.HTTP_201_CREATED)
