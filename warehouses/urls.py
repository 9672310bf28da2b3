"""URL routes for the warehouses app."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import WarehouseViewSet

router = SimpleRouter()
router.register(r"", WarehouseViewSet, basename="warehouse")

urlpatterns = [path("", include(router.urls))]
