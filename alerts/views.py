"""Alert endpoints: list, summary, generate, acknowledge, resolve.

Reads are open to every inventory role; mutations are admin/manager only.
"""

from common.pagination import DefaultPagination
from common.throttling import WriteScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import SAFE_METHODS
from rest_framework.response import Response
from users.permissions import IsAdminOrManager, IsInventoryUser

from .selectors import alert_summary, alerts_queryset
from .serializers import AlertSerializer
from .services import acknowledge_alert, generate_alerts, resolve_alert


@extend_schema_view(
    list=extend_schema(
        tags=["Alert Endpoints"],
        summary="List alerts",
        parameters=[
            OpenApiParameter(name="status", description="Active, Acknowledged or Resolved", required=False, type=str),
            OpenApiParameter(name="severity", description="Low, Medium, High or Critical", required=False, type=str),
            OpenApiParameter(name="type", description="Alert type", required=False, type=str),
        ],
    ),
    retrieve=extend_schema(tags=["Alert Endpoints"], summary="Get alert"),
)
class AlertViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = AlertSerializer
    pagination_class = DefaultPagination
    throttle_classes = [WriteScopedRateThrottle]
    throttle_scope = "alerts_write"
    filter_backends = []

    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return [IsInventoryUser()]
        return [IsAdminOrManager()]

    def get_queryset(self):
        params = self.request.query_params
        return alerts_queryset(
            status=params.get("status"),
            severity=params.get("severity"),
            alert_type=params.get("type"),
        )

    @extend_schema(
        tags=["Alert Endpoints"],
        summary="Alert summary",
        examples=[
            OpenApiExample(
                "Summary",
                value={"active_alerts": 3, "critical_alerts": 1, "high_alerts": 1, "recent_alerts": []},
                response_only=True,
            )
        ],
    )
    @action(detail=False, methods=["get"])
    def summary(self, request):
        data = alert_summary()
        data["recent_alerts"] = AlertSerializer(data["recent_alerts"], many=True).data
        return Response(data)

    @extend_schema(tags=["Alert Endpoints"], summary="Scan products and raise low-stock alerts", request=None)
    @action(detail=False, methods=["post"])
    def generate(self, request):
        created = generate_alerts()
        return Response(
            {
                "success": True,
                "message": f"Generated {len(created)} new alerts",
                "data": AlertSerializer(created, many=True).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(tags=["Alert Endpoints"], summary="Acknowledge alert", request=None)
    @action(detail=True, methods=["post"])
    def acknowledge(self, request, pk=None):
        alert = acknowledge_alert(alert=self.get_object(), user=request.user)
        return Response(AlertSerializer(alert).data)

    @extend_schema(tags=["Alert Endpoints"], summary="Resolve alert", request=None)
    @action(detail=True, methods=["post"])
    def resolve(self, request, pk=None):
        alert = resolve_alert(alert=self.get_object(), user=request.user)
        return Response(AlertSerializer(alert).data)


# EOF
