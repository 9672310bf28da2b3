from rest_framework.routers import SimpleRouter

from .views import AlertViewSet

router = SimpleRouter()
router.register(r"", AlertViewSet, basename="alert")

urlpatterns = router.urls

# EOF
