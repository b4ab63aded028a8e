"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``LoginView``           — POST /auth/login/
- ``SuperAdminSetupView`` — GET / POST /setup-super-admin/
- ``MeView``              — GET / PATCH /me/
- ``UserViewSet``         — /users/  (list, create, retrieve, assign-role)
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from .serializers import (
    AssignRoleSerializer,
    CustomTokenObtainPairSerializer,
    LoginRequestSerializer,
    MeUpdateSerializer,
    SuperAdminSetupSerializer,
    TokenResponseSerializer,
    UserCreateSerializer,
    UserDetailSerializer,
    UserFilterSerializer,
    UserListSerializer,
)
from .services import CurrentUserService, SuperAdminSetupService, UserManagementService


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class LoginView(APIView):
    """
    POST /api/accounts/auth/login/

    Public endpoint.  Authenticates a user via any of the four
    unique identifiers (username, national_id, phone_number, email)
    plus password.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(response=TokenResponseSerializer, description="Token pair and user."),
            400: OpenApiResponse(description="Invalid credentials."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = CustomTokenObtainPairSerializer(
            data=request.data,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)

        payload = dict(serializer.validated_data)  # access + refresh
        payload["user"] = UserDetailSerializer(serializer.user).data
        return Response(payload, status=status.HTTP_200_OK)


class SuperAdminSetupView(APIView):
    """
    GET  /api/accounts/setup-super-admin/ → ``{"setup_required": bool}``
    POST /api/accounts/setup-super-admin/ → create the first Super Admin.

    Public; closes itself once a Super Admin exists (409 afterwards).
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Super admin setup status",
        responses={200: OpenApiResponse(description="Whether setup is still required.")},
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        return Response(
            {"setup_required": not SuperAdminSetupService.super_admin_exists()},
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Create the first super admin",
        request=SuperAdminSetupSerializer,
        responses={
            201: OpenApiResponse(response=UserDetailSerializer, description="Super Admin created."),
            409: OpenApiResponse(description="A Super Admin already exists."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = SuperAdminSetupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = SuperAdminSetupService.create_initial_super_admin(serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_201_CREATED)


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """
    GET   /api/accounts/me/ → Retrieve current user profile.
    PATCH /api/accounts/me/ → Update own profile fields.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user",
        responses={200: OpenApiResponse(response=UserDetailSerializer, description="Profile.")},
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        user = CurrentUserService.get_profile(request.user)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update current user",
        request=MeUpdateSerializer,
        responses={200: OpenApiResponse(response=UserDetailSerializer, description="Updated profile.")},
        tags=["Auth"],
    )
    def patch(self, request: Request) -> Response:
        serializer = MeUpdateSerializer(
            instance=request.user,
            data=request.data,
            partial=True,
        )
        serializer.is_valid(raise_exception=True)
        user = CurrentUserService.update_profile(request.user, serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  User Management ViewSet
# ═══════════════════════════════════════════════════════════════════


class UserViewSet(viewsets.ViewSet):
    """
    /api/accounts/users/

    Super Admin user management (list, create, retrieve, assign-role).
    All heavy lifting is delegated to ``UserManagementService``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List users",
        parameters=[UserFilterSerializer],
        responses={200: OpenApiResponse(response=UserListSerializer(many=True), description="Users.")},
        tags=["Users"],
    )
    def list(self, request: Request) -> Response:
        filters = UserFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        qs = UserManagementService.list_users(request.user, **filters.validated_data)
        return Response(UserListSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create user",
        request=UserCreateSerializer,
        responses={
            201: OpenApiResponse(response=UserDetailSerializer, description="User created."),
            403: OpenApiResponse(description="Super Admin only."),
            409: OpenApiResponse(description="Duplicate identifier."),
        },
        tags=["Users"],
    )
    def create(self, request: Request) -> Response:
        serializer = UserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserManagementService.create_user(request.user, serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve user",
        responses={200: OpenApiResponse(response=UserDetailSerializer, description="User.")},
        tags=["Users"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        user = UserManagementService.get_user(request.user, int(pk))
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["patch"], url_path="assign-role")
    @extend_schema(
        summary="Assign role",
        request=AssignRoleSerializer,
        responses={200: OpenApiResponse(response=UserDetailSerializer, description="Updated user.")},
        tags=["Users"],
    )
    def assign_role(self, request: Request, pk: str = None) -> Response:
        serializer = AssignRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserManagementService.assign_role(
            request.user,
            user_id=int(pk),
            role=serializer.validated_data["role"],
        )
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)
