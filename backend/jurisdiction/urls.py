"""
Jurisdiction app URL configuration.

Included from ``backend/urls.py`` as::

    path('api/jurisdiction/', include('jurisdiction.urls')),

    GET/POST /api/jurisdiction/commissionerates/
    GET/POST /api/jurisdiction/dcp-zones/?commissionerate=<id>
    GET/POST /api/jurisdiction/municipal-zones/?dcp_zone=<id>
    GET/POST /api/jurisdiction/acp-divisions/?municipal_zone=<id>
"""

from rest_framework.routers import DefaultRouter

from .views import (
    ACPDivisionViewSet,
    CommissionerateViewSet,
    DCPZoneViewSet,
    MunicipalZoneViewSet,
)

app_name = "jurisdiction"

router = DefaultRouter()
router.register(r"commissionerates", CommissionerateViewSet, basename="commissionerate")
router.register(r"dcp-zones", DCPZoneViewSet, basename="dcp-zone")
router.register(r"municipal-zones", MunicipalZoneViewSet, basename="municipal-zone")
router.register(r"acp-divisions", ACPDivisionViewSet, basename="acp-division")

urlpatterns = router.urls
