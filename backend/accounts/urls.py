"""
Accounts app URL configuration.

All routes are namespaced under ``accounts`` and designed to be included
in the project-level ``urls.py`` as::

    path('api/accounts/', include('accounts.urls')),

Endpoint Map
------------
Authentication
    POST   /auth/login/                 → LoginView
    POST   /auth/token/refresh/         → TokenRefreshView (SimpleJWT)
    GET    /setup-super-admin/          → SuperAdminSetupView (status)
    POST   /setup-super-admin/          → SuperAdminSetupView (bootstrap)

Current User Profile ("Me")
    GET    /me/                         → MeView  (retrieve)
    PATCH  /me/                         → MeView  (partial update)

User Management (Super Admin)
    GET    /users/                      → UserViewSet.list
    POST   /users/                      → UserViewSet.create
    GET    /users/{id}/                 → UserViewSet.retrieve
    PATCH  /users/{id}/assign-role/     → UserViewSet.assign_role
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .views import LoginView, MeView, SuperAdminSetupView, UserViewSet

app_name = "accounts"

router = DefaultRouter()
router.register(r"users", UserViewSet, basename="user")

urlpatterns = [
    # ── Authentication ───────────────────────────────────────────────
    path("auth/login/", LoginView.as_view(), name="login"),
    path(
        "auth/token/refresh/",
        TokenRefreshView.as_view(),
        name="token-refresh",
    ),
    path(
        "setup-super-admin/",
        SuperAdminSetupView.as_view(),
        name="setup-super-admin",
    ),

    # ── Current User (Me) ───────────────────────────────────────────
    path("me/", MeView.as_view(), name="me"),

    # ── Router-registered viewsets (users/) ──────────────────────────
    path("", include(router.urls)),
]
