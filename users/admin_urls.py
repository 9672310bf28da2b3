"""Router for admin-only user management."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import UserAdminViewSet

router = SimpleRouter()
router.register(r"", UserAdminViewSet, basename="user")

urlpatterns = [path("", include(router.urls))]
