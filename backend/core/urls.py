"""
Core app URL configuration.

Provides the dashboard aggregation endpoint and the system-wide
constants/enums used by the frontend.

URL prefix (registered in ``backend/urls.py``)::

    path('api/core/', include('core.urls'))

Endpoint summary
----------------
GET  /api/core/dashboard/   — Complaint statistics (role-scoped).
GET  /api/core/constants/   — System choice enumerations for frontend dropdowns.
"""

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    # ── Dashboard ────────────────────────────────────────────────────
    path(
        "dashboard/",
        views.DashboardStatsView.as_view(),
        name="dashboard-stats",
    ),

    # ── System Constants / Enums ─────────────────────────────────────
    path(
        "constants/",
        views.SystemConstantsView.as_view(),
        name="system-constants",
    ),
]
