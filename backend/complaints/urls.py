"""
Complaints app URL configuration.

All routes are registered under the ``/api/`` prefix
(included from ``backend.urls``).

Route Hierarchy
---------------
  /api/complaints/                                   → list / create
  /api/complaints/{id}/                              → retrieve / partial_update / destroy

  ── Workflow @actions ───────────────────────────────────────────
  POST /api/complaints/{id}/forward/
  POST /api/complaints/{id}/notices/{first|second}/issue/
  POST /api/complaints/{id}/notices/{first|second}/approve/
  POST /api/complaints/{id}/notices/{first|second}/reject/

  ── Nested: FIRs ────────────────────────────────────────────────
  GET/POST          /api/complaints/{complaint_pk}/firs/
  GET/PATCH/DELETE  /api/complaints/{complaint_pk}/firs/{id}/

  ── Nested: Comments ────────────────────────────────────────────
  GET/POST          /api/complaints/{complaint_pk}/comments/
  PATCH/DELETE      /api/complaints/{complaint_pk}/comments/{id}/

  ── Nested: Attachments ─────────────────────────────────────────
  GET/POST          /api/complaints/{complaint_pk}/attachments/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_nested.routers import NestedDefaultRouter

from .views import AttachmentViewSet, CommentViewSet, ComplaintViewSet, FIRViewSet

# ── Primary Router ──────────────────────────────────────────────────
router = DefaultRouter()
router.register(
    prefix=r"complaints",
    viewset=ComplaintViewSet,
    basename="complaint",
)

# ── Nested Routers (under /complaints/{complaint_pk}/) ──────────────
complaints_router = NestedDefaultRouter(
    parent_router=router,
    parent_prefix=r"complaints",
    lookup="complaint",
)
complaints_router.register(
    prefix=r"firs",
    viewset=FIRViewSet,
    basename="complaint-fir",
)
complaints_router.register(
    prefix=r"comments",
    viewset=CommentViewSet,
    basename="complaint-comment",
)
complaints_router.register(
    prefix=r"attachments",
    viewset=AttachmentViewSet,
    basename="complaint-attachment",
)

urlpatterns = [
    path("", include(router.urls)),
    path("", include(complaints_router.urls)),
]
