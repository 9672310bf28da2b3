from django.urls import path

from .views import DashboardView, LedgerListView, ProductLedgerView, WarehouseLedgerView, WarehouseStockView

ledger_urlpatterns = [
    path("", LedgerListView.as_view(), name="ledger-list"),
    path("product/<int:product_id>/", ProductLedgerView.as_view(), name="ledger-product"),
    path("warehouse/<int:warehouse_id>/", WarehouseLedgerView.as_view(), name="ledger-warehouse"),
]

dashboard_urlpatterns = [
    path("", DashboardView.as_view(), name="dashboard"),
    path("warehouse-stock/", WarehouseStockView.as_view(), name="dashboard-warehouse-stock"),
]

# EOF
