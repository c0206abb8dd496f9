"""Account DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import User


class AddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100, required=False, default="", allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, default="", allow_blank=True)
    zip_code = serializers.CharField(max_length=20, required=False, default="", allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, default="", allow_blank=True)


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    name = serializers.CharField(required=False, default="", allow_blank=True)
    phone = serializers.CharField(required=False, default="", allow_blank=True)
    address = AddressSerializer(required=False)


class UpdateProfileSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    address = AddressSerializer(required=False)


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class UserSerializer(serializers.ModelSerializer):
    """Read serializer; never exposes the password hash."""

    name = serializers.CharField(source="first_name", read_only=True)
    address = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "name",
            "email",
            "phone",
            "role",
            "is_active",
            "address",
            "date_joined",
        ]
        read_only_fields = fields

    def get_address(self, obj: User):
        return obj.default_address()
