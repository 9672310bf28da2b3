"""
URL configuration for the StockMaster backend.

All API routes are versioned under /api/v1/; the OpenAPI schema and Swagger
UI are served from /api/schema/ and /api/docs/.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from inventory.urls import dashboard_urlpatterns, ledger_urlpatterns

from .health import health

admin.site.site_header = "StockMaster Admin"
admin.site.index_title = "Inventory administration"

urlpatterns = [
    path("admin/", admin.site.urls),
    # API schema and Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="api-schema"), name="api-docs"),
    # Healthcheck
    path("health/", health, name="health"),
    # Versioned v1 routes only
    path("api/v1/", include("users.urls")),
    path("api/v1/warehouses/", include("warehouses.urls")),
    path("api/v1/products/", include("products.urls")),
    path("api/v1/", include("movements.urls")),
    path("api/v1/ledger/", include(ledger_urlpatterns)),
    path("api/v1/dashboard/", include(dashboard_urlpatterns)),
    path("api/v1/alerts/", include("alerts.urls")),
]
