"""
Root URLconf of the complaint-tracking API.

    /api/accounts/       login, profile, user management
    /api/jurisdiction/   commissionerate -> ACP division master data
    /api/core/           dashboard and constants
    /api/complaints/     complaints with nested FIRs, comments, attachments
    /api/docs/           Swagger UI over /api/schema/
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('admin/', admin.site.urls),

    # ── App routes ───────────────────────────────────────────────────
    path('api/accounts/', include('accounts.urls')),
    path('api/jurisdiction/', include('jurisdiction.urls')),
    path('api/core/', include('core.urls')),
    path('api/', include('complaints.urls')),

    # ── Swagger / OpenAPI schema ─────────────────────────────────────
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

# ── Serve media files in local development ───────────────────────────
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
