"""Warehouse and location endpoints.

Reads are open to every inventory role; writes are admin-only.
"""

from django.db.models import Q
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import SAFE_METHODS
from rest_framework.response import Response
from users.permissions import IsAdmin, IsInventoryUser

from .models import Location, Warehouse
from .serializers import LocationSerializer, WarehouseSerializer
from .services import delete_location, delete_warehouse


@extend_schema_view(
    list=extend_schema(
        tags=["Warehouse Endpoints"],
        summary="List warehouses",
        parameters=[
            OpenApiParameter(name="status", description="active or inactive", required=False, type=str),
            OpenApiParameter(name="search", description="Name or code contains", required=False, type=str),
        ],
    ),
    retrieve=extend_schema(tags=["Warehouse Endpoints"], summary="Get warehouse"),
    create=extend_schema(tags=["Warehouse Endpoints"], summary="Create warehouse"),
    update=extend_schema(tags=["Warehouse Endpoints"], summary="Update warehouse"),
    partial_update=extend_schema(tags=["Warehouse Endpoints"], summary="Partial update warehouse"),
    destroy=extend_schema(tags=["Warehouse Endpoints"], summary="Delete warehouse"),
)
class WarehouseViewSet(viewsets.ModelViewSet):
    serializer_class = WarehouseSerializer
    pagination_class = None
    filter_backends = []

    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return [IsInventoryUser()]
        return [IsAdmin()]

    def get_queryset(self):
        qs = Warehouse.objects.select_related("manager").prefetch_related("locations").order_by("-created_at", "id")
        status_param = self.request.query_params.get("status")
        search = self.request.query_params.get("search")
        if status_param:
            qs = qs.filter(status=status_param)
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(code__icontains=search))
        return qs

    def perform_destroy(self, instance):
        delete_warehouse(warehouse=instance)

    @extend_schema(tags=["Warehouse Endpoints"], summary="List or add locations", request=LocationSerializer)
    @action(detail=True, methods=["get", "post"], url_path="locations")
    def locations(self, request, pk=None):
        warehouse = self.get_object()
        if request.method == "GET":
            qs = Location.objects.filter(warehouse=warehouse).order_by("code")
            return Response(LocationSerializer(qs, many=True).data)
        serializer = LocationSerializer(data=request.data, context={"warehouse": warehouse})
        serializer.is_valid(raise_exception=True)
        serializer.save(warehouse=warehouse)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Warehouse Endpoints"], summary="Update or delete a location", request=LocationSerializer)
    @action(detail=True, methods=["get", "put", "patch", "delete"], url_path=r"locations/(?P<location_id>\d+)")
    def location_detail(self, request, pk=None, location_id=None):
        warehouse = self.get_object()
        location = get_object_or_404(Location, pk=location_id, warehouse=warehouse)
        if request.method == "GET":
            return Response(LocationSerializer(location).data)
        if request.method == "DELETE":
            delete_location(location=location)
            return Response(status=status.HTTP_204_NO_CONTENT)
        serializer = LocationSerializer(
            location,
            data=request.data,
            partial=request.method == "PATCH",
            context={"warehouse": warehouse},
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


# EOF
