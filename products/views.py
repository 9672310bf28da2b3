"""Product endpoints: CRUD (soft delete) and per-location stock breakdown."""

from django.db.models import F
from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from inventory.selectors import stock_breakdown_for_product
from rest_framework import filters as drf_filters
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import SAFE_METHODS
from rest_framework.response import Response
from users.permissions import IsAdminOrManager, IsInventoryUser

from .models import Product
from .serializers import ProductSerializer
from .services import deactivate_product


class ProductFilterSet(filters.FilterSet):
    category = filters.CharFilter(field_name="category", lookup_expr="iexact")
    status = filters.ChoiceFilter(choices=Product.STATUS_CHOICES)
    low_stock = filters.BooleanFilter(method="filter_low_stock")

    class Meta:
        model = Product
        fields = ["category", "status", "low_stock"]

    def filter_low_stock(self, queryset, name, value):
        if value:
            return queryset.filter(total_stock__lt=F("reorder_level"))
        return queryset.filter(total_stock__gte=F("reorder_level"))


@extend_schema_view(
    list=extend_schema(
        tags=["Product Endpoints"],
        summary="List products",
        description="Filters: `category`, `status`, `low_stock`. Search by name or SKU via `search`.",
    ),
    retrieve=extend_schema(tags=["Product Endpoints"], summary="Get product with stock by location"),
    create=extend_schema(tags=["Product Endpoints"], summary="Create product (SKU generated when omitted)"),
    update=extend_schema(tags=["Product Endpoints"], summary="Update product metadata"),
    partial_update=extend_schema(tags=["Product Endpoints"], summary="Partial update product metadata"),
    destroy=extend_schema(tags=["Product Endpoints"], summary="Deactivate product"),
)
class ProductViewSet(viewsets.ModelViewSet):
    queryset = Product.objects.all().order_by("-created_at", "id")
    serializer_class = ProductSerializer
    filterset_class = ProductFilterSet
    filter_backends = [filters.DjangoFilterBackend, drf_filters.SearchFilter, drf_filters.OrderingFilter]
    search_fields = ["name", "sku"]
    ordering_fields = ["name", "sku", "total_stock", "created_at"]

    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return [IsInventoryUser()]
        return [IsAdminOrManager()]

    def destroy(self, request, *args, **kwargs):
        product = deactivate_product(product=self.get_object())
        return Response({"success": True, "message": "Product deactivated", "data": self.get_serializer(product).data})

    @extend_schema(
        tags=["Product Endpoints"],
        summary="Distinct product categories",
        examples=[
            OpenApiExample(
                "Categories", value={"success": True, "data": ["Electronics", "Furniture"]}, response_only=True
            )
        ],
    )
    @action(detail=False, methods=["get"])
    def categories(self, request):
        categories = Product.objects.order_by("category").values_list("category", flat=True).distinct()
        return Response({"success": True, "data": list(categories)})

    @extend_schema(
        tags=["Product Endpoints"],
        summary="Stock by location",
        examples=[
            OpenApiExample(
                "Stock",
                value={
                    "product": 1,
                    "sku": "ELE-0001",
                    "total_stock": 15,
                    "locations": [
                        {
                            "location": 3,
                            "location_code": "A-01",
                            "warehouse": 1,
                            "warehouse_code": "WH1",
                            "quantity": 15,
                        }
                    ],
                },
                response_only=True,
            )
        ],
    )
    @action(detail=True, methods=["get"])
    def stock(self, request, pk=None):
        product = self.get_object()
        return Response(
            {
                "product": product.id,
                "sku": product.sku,
                "total_stock": product.total_stock,
                "locations": stock_breakdown_for_product(product),
            }
        )


# EOF
