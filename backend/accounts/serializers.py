"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here — all domain
rules are delegated to ``services.py``.
"""

from __future__ import annotations

import re
from typing import Any

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.validators import UnicodeUsernameValidator
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import Role

User = get_user_model()

_PHONE_REGEX = re.compile(r"^\+?\d{7,15}$")


def _validate_phone(value: str) -> str:
    if not _PHONE_REGEX.match(value):
        raise serializers.ValidationError(
            "Phone number must contain 7 to 15 digits with an optional leading '+'."
        )
    return value


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class LoginRequestSerializer(serializers.Serializer):
    """
    Accepts multi-field login credentials.

    The client sends ``identifier`` (which may be a username,
    national_id, phone_number, or email) together with ``password``.
    """

    identifier = serializers.CharField(
        help_text="Username, National ID, Phone Number, or Email.",
    )
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="User account password.",
    )


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom SimpleJWT serializer that:

    1. Accepts ``identifier`` + ``password`` instead of
       ``username`` + ``password``.
    2. Resolves the user via the ``MultiFieldAuthBackend``.
    3. Injects the ``role`` claim into the JWT access token payload so
       the frontend can gate workflow buttons without another call.
    """

    username_field = "identifier"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Replace SimpleJWT's default 'username' field with 'identifier'
        self.fields.pop(self.username_field, None)
        self.fields["identifier"] = serializers.CharField(
            help_text="Username, National ID, Phone Number, or Email.",
        )

    @classmethod
    def get_token(cls, user) -> Any:
        token = super().get_token(user)
        token["role"] = "SUPER_ADMIN" if user.is_superuser else user.role
        return token

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        """
        Authenticate using the custom ``MultiFieldAuthBackend``.

        Returns a dict containing ``access`` and ``refresh``; the view
        adds the serialised ``user``.
        """
        user = authenticate(
            request=self.context.get("request"),
            identifier=attrs.get("identifier"),
            password=attrs.get("password"),
        )

        if user is None:
            raise serializers.ValidationError(
                {"detail": "Invalid credentials."},
                code="authentication",
            )

        if not user.is_active:
            raise serializers.ValidationError(
                {"detail": "User account is disabled."},
                code="authentication",
            )

        refresh = self.get_token(user)
        self.user = user
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }


class TokenResponseSerializer(serializers.Serializer):
    """
    Serializes the JWT token pair returned after successful login.
    """

    access = serializers.CharField(read_only=True)
    refresh = serializers.CharField(read_only=True)
    user = serializers.SerializerMethodField()

    def get_user(self, obj: dict) -> dict | None:
        user = obj.get("user")
        if user:
            return UserDetailSerializer(user).data
        return None


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UserSummarySerializer(serializers.ModelSerializer):
    """
    Compact user reference embedded in complaint, FIR, and comment
    payloads (creator, assignee, approvers).
    """

    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "full_name", "role"]
        read_only_fields = fields


class UserListSerializer(serializers.ModelSerializer):
    """
    Serializer for listing users (admin views).
    """

    role_display = serializers.CharField(
        source="get_role_display",
        read_only=True,
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "national_id",
            "phone_number",
            "first_name",
            "last_name",
            "is_active",
            "role",
            "role_display",
        ]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Full user representation (used in retrieve, me, login and user
    creation responses).
    """

    role_display = serializers.CharField(
        source="get_role_display",
        read_only=True,
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "national_id",
            "phone_number",
            "first_name",
            "last_name",
            "is_active",
            "date_joined",
            "role",
            "role_display",
        ]
        read_only_fields = [
            "id",
            "username",
            "date_joined",
            "is_active",
            "role",
            "role_display",
        ]


class UserCreateSerializer(serializers.ModelSerializer):
    """
    Validates a new account created by a Super Admin (or by the
    one-time super-admin bootstrap, which forces the role).
    """

    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Minimum 8 characters.",
    )
    role = serializers.ChoiceField(
        choices=Role.choices,
        default=Role.COMPLAINANT,
        help_text="Role held by the new account.",
    )

    class Meta:
        model = User
        fields = [
            "username",
            "password",
            "email",
            "phone_number",
            "first_name",
            "last_name",
            "national_id",
            "role",
        ]
        # Uniqueness is checked by the service so a duplicate is a 409.
        extra_kwargs = {
            "username": {"validators": [UnicodeUsernameValidator()]},
            "email": {"required": True, "validators": []},
            "first_name": {"required": True},
            "last_name": {"required": True},
            "national_id": {"required": True, "validators": []},
            "phone_number": {"required": True, "validators": []},
        }

    def validate_phone_number(self, value: str) -> str:
        return _validate_phone(value)


class SuperAdminSetupSerializer(UserCreateSerializer):
    """Same fields as ``UserCreateSerializer`` minus ``role``."""

    role = None

    class Meta(UserCreateSerializer.Meta):
        fields = [f for f in UserCreateSerializer.Meta.fields if f != "role"]


class AssignRoleSerializer(serializers.Serializer):
    """
    Accepts a ``role`` to assign to a user.

    Used by the ``assign-role`` action on ``UserViewSet``.
    """

    role = serializers.ChoiceField(
        choices=Role.choices,
        help_text="New role for the user.",
    )


class UserFilterSerializer(serializers.Serializer):
    """Query parameters accepted by ``GET /api/accounts/users/``."""

    role = serializers.ChoiceField(choices=Role.choices, required=False)
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
    search = serializers.CharField(required=False, allow_blank=True)


class MeUpdateSerializer(serializers.ModelSerializer):
    """
    Allows the authenticated user to update limited profile fields.
    Sensitive fields (role, is_active, username) are read-only and
    cannot be self-modified.
    """

    class Meta:
        model = User
        fields = [
            "email",
            "phone_number",
            "first_name",
            "last_name",
        ]

    def validate_email(self, value: str) -> str:
        if (
            self.instance
            and User.objects.exclude(pk=self.instance.pk)
            .filter(email=value)
            .exists()
        ):
            raise serializers.ValidationError(
                "This email is already in use by another account."
            )
        return value

    def validate_phone_number(self, value: str) -> str:
        _validate_phone(value)
        if (
            self.instance
            and User.objects.exclude(pk=self.instance.pk)
            .filter(phone_number=value)
            .exists()
        ):
            raise serializers.ValidationError(
                "This phone number is already in use by another account."
            )
        return value
