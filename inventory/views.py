"""Stock ledger and dashboard read views."""

from common.pagination import LedgerPagination
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from products.models import Product
from rest_framework import generics
from rest_framework.response import Response
from rest_framework.views import APIView
from users.permissions import IsInventoryUser, ensure_warehouse_access
from warehouses.models import Warehouse

from .selectors import dashboard_stats, ledger_entries, warehouse_stock_totals
from .serializers import StockLedgerEntrySerializer

DATE_PARAMETERS = [
    OpenApiParameter(name="start_date", description="movement_date >= start (ISO date or datetime)", type=str),
    OpenApiParameter(name="end_date", description="movement_date <= end (ISO date or datetime)", type=str),
    OpenApiParameter(name="page", description="Page number", required=False, type=int),
    OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
]


class LedgerListView(generics.ListAPIView):
    """Movement history, newest first.

    Filters:
    - `movement_type`: receipt, delivery, transfer or adjustment
    - `product`, `warehouse`, `location`: ids
    - `start_date` / `end_date`: ISO date or datetime bounds on movement_date
    """

    permission_classes = [IsInventoryUser]
    serializer_class = StockLedgerEntrySerializer
    pagination_class = LedgerPagination
    filter_backends = []

    def get_queryset(self):
        params = self.request.query_params
        return ledger_entries(
            user=self.request.user,
            movement_type=params.get("movement_type"),
            product_id=params.get("product"),
            warehouse_id=params.get("warehouse"),
            location_id=params.get("location"),
            start_date=params.get("start_date"),
            end_date=params.get("end_date"),
        )

    @extend_schema(
        tags=["Ledger Endpoints"],
        summary="List stock movements",
        parameters=[
            OpenApiParameter(name="movement_type", description="Movement type filter", required=False, type=str),
            OpenApiParameter(name="product", description="Product id", required=False, type=int),
            OpenApiParameter(name="warehouse", description="Warehouse id (any leg)", required=False, type=int),
            OpenApiParameter(name="location", description="Location id", required=False, type=int),
            *DATE_PARAMETERS,
        ],
        examples=[
            OpenApiExample(
                "Ledger page",
                value={
                    "count": 1,
                    "next": None,
                    "previous": None,
                    "results": [
                        {
                            "id": 7,
                            "movement_type": "receipt",
                            "document_id": 3,
                            "document_number": "REC-000003",
                            "product": {"id": 1, "name": "Cable", "sku": "ELE-0001", "uom": "pcs", "total_stock": 15},
                            "warehouse": {"id": 1, "name": "Main", "code": "WH1"},
                            "location": {"id": 2, "code": "A-01", "name": "Aisle 1", "warehouse": 1},
                            "quantity": 10,
                            "quantity_before": 5,
                            "quantity_after": 15,
                            "performed_by": {"id": 4, "name": "Dana", "email": "dana@example.com"},
                            "movement_date": "2025-01-01T12:00:00Z",
                        }
                    ],
                },
                response_only=True,
            )
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class ProductLedgerView(generics.ListAPIView):
    permission_classes = [IsInventoryUser]
    serializer_class = StockLedgerEntrySerializer
    pagination_class = LedgerPagination
    filter_backends = []

    def get_queryset(self):
        product = get_object_or_404(Product, pk=self.kwargs["product_id"])
        params = self.request.query_params
        return ledger_entries(
            user=self.request.user,
            product_id=product.pk,
            start_date=params.get("start_date"),
            end_date=params.get("end_date"),
        )

    @extend_schema(tags=["Ledger Endpoints"], summary="Movements of one product", parameters=DATE_PARAMETERS)
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class WarehouseLedgerView(generics.ListAPIView):
    """Movements where the warehouse is the main, source or destination warehouse."""

    permission_classes = [IsInventoryUser]
    serializer_class = StockLedgerEntrySerializer
    pagination_class = LedgerPagination
    filter_backends = []

    def get_queryset(self):
        warehouse = get_object_or_404(Warehouse, pk=self.kwargs["warehouse_id"])
        ensure_warehouse_access(self.request.user, warehouse.pk)
        params = self.request.query_params
        return ledger_entries(
            user=self.request.user,
            warehouse_id=warehouse.pk,
            start_date=params.get("start_date"),
            end_date=params.get("end_date"),
        )

    @extend_schema(tags=["Ledger Endpoints"], summary="Movements of one warehouse", parameters=DATE_PARAMETERS)
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class DashboardView(APIView):
    permission_classes = [IsInventoryUser]

    @extend_schema(
        tags=["Dashboard Endpoints"],
        summary="Inventory KPIs",
        examples=[
            OpenApiExample(
                "Dashboard",
                value={
                    "success": True,
                    "data": {
                        "total_products": 42,
                        "low_stock_products": 3,
                        "out_of_stock_products": 1,
                        "pending_receipts": 2,
                        "pending_deliveries": 5,
                        "pending_transfers": 0,
                        "pending_adjustments": 1,
                        "active_alerts": 4,
                    },
                },
                response_only=True,
            )
        ],
    )
    def get(self, request):
        return Response({"success": True, "data": dashboard_stats()})


class WarehouseStockView(APIView):
    permission_classes = [IsInventoryUser]

    @extend_schema(tags=["Dashboard Endpoints"], summary="Total units per warehouse")
    def get(self, request):
        return Response({"success": True, "data": warehouse_stock_totals()})


# EOF
