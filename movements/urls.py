from rest_framework.routers import SimpleRouter

from .views import AdjustmentViewSet, DeliveryViewSet, ReceiptViewSet, TransferViewSet

router = SimpleRouter()
router.register(r"receipts", ReceiptViewSet, basename="receipt")
router.register(r"deliveries", DeliveryViewSet, basename="delivery")
router.register(r"transfers", TransferViewSet, basename="transfer")
router.register(r"adjustments", AdjustmentViewSet, basename="adjustment")

urlpatterns = router.urls

# EOF
