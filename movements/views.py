"""Movement document endpoints.

Each document type gets a CRUD viewset (edits and deletes only while draft)
plus action endpoints that drive its lifecycle. Every mutation responds with
the updated, populated document.
"""

from common.pagination import DefaultPagination
from common.throttling import WriteScopedRateThrottle
from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from users.permissions import IsInventoryUser

from . import selectors, services
from .serializers import (
    AdjustmentSerializer,
    AssignUserSerializer,
    DeliverySerializer,
    DocumentStatusSerializer,
    PickPackSerializer,
    ReceiptSerializer,
    TransferSerializer,
)

LIST_PARAMETERS = [
    OpenApiParameter(name="status", description="Document status filter", required=False, type=str),
    OpenApiParameter(name="search", description="Number or reference contains", required=False, type=str),
    OpenApiParameter(name="page", description="Page number", required=False, type=int),
    OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
]


class DocumentViewSet(viewsets.ModelViewSet):
    """Shared behaviour for the four document viewsets."""

    permission_classes = [IsInventoryUser]
    pagination_class = DefaultPagination
    throttle_classes = [WriteScopedRateThrottle]
    throttle_scope = "movements_write"
    filter_backends = [filters.DjangoFilterBackend, drf_filters.SearchFilter, drf_filters.OrderingFilter]
    filterset_fields = ["status"]
    ordering_fields = ["created_at", "number", "status"]
    selector = None

    def get_queryset(self):
        return type(self).selector(self.request.user)

    def perform_destroy(self, instance):
        services.delete_document(document=instance, user=self.request.user)

    def _document_response(self, document, status_code=200):
        document = self.get_queryset().get(pk=document.pk)
        return Response(self.get_serializer(document).data, status=status_code)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        payload = DocumentStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        document = services.set_document_status(
            document=self.get_object(), status=payload.validated_data["status"], user=request.user
        )
        return self._document_response(document)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        document = services.cancel_document(document=self.get_object(), user=request.user)
        return self._document_response(document)


def _document_schema(tag: str, noun: str):
    return extend_schema_view(
        list=extend_schema(tags=[tag], summary=f"List {noun}s", parameters=LIST_PARAMETERS),
        retrieve=extend_schema(tags=[tag], summary=f"Get {noun}"),
        create=extend_schema(tags=[tag], summary=f"Create {noun} (draft)"),
        update=extend_schema(tags=[tag], summary=f"Update draft {noun}"),
        partial_update=extend_schema(tags=[tag], summary=f"Partial update draft {noun}"),
        destroy=extend_schema(tags=[tag], summary=f"Delete draft {noun}"),
        set_status=extend_schema(
            tags=[tag], summary=f"Move {noun} to waiting or ready", request=DocumentStatusSerializer
        ),
        cancel=extend_schema(tags=[tag], summary=f"Cancel {noun}", request=None),
    )


@_document_schema("Receipt Endpoints", "receipt")
class ReceiptViewSet(DocumentViewSet):
    serializer_class = ReceiptSerializer
    selector = staticmethod(selectors.receipts_for_user)
    filterset_fields = ["status", "warehouse"]
    search_fields = ["number", "supplier", "reference_number"]

    @extend_schema(
        tags=["Receipt Endpoints"],
        summary="Validate receipt",
        description="Adds every item's quantity to stock at its location and marks the receipt done.",
        request=None,
        examples=[
            OpenApiExample(
                "Already validated",
                value={"success": False, "message": "Receipt already validated"},
                response_only=True,
                status_codes=["400"],
            )
        ],
    )
    @action(detail=True, methods=["post"])
    def validate(self, request, pk=None):
        receipt = services.validate_receipt(receipt=self.get_object(), user=request.user)
        return self._document_response(receipt)


@_document_schema("Delivery Endpoints", "delivery")
class DeliveryViewSet(DocumentViewSet):
    serializer_class = DeliverySerializer
    selector = staticmethod(selectors.deliveries_for_user)
    filterset_fields = ["status", "warehouse", "picker", "packer"]
    search_fields = ["number", "customer", "reference_number"]

    @staticmethod
    def _lines(request):
        data = request.data
        if isinstance(data, list):
            data = {"items": data}
        payload = PickPackSerializer(data=data)
        payload.is_valid(raise_exception=True)
        return payload.validated_data.get("items")

    @extend_schema(tags=["Delivery Endpoints"], summary="Assign picker", request=AssignUserSerializer)
    @action(detail=True, methods=["post"], url_path="assign-picker")
    def assign_picker(self, request, pk=None):
        payload = AssignUserSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        delivery = services.assign_picker(
            delivery=self.get_object(), picker=payload.validated_data["user"], user=request.user
        )
        return self._document_response(delivery)

    @extend_schema(tags=["Delivery Endpoints"], summary="Assign packer", request=AssignUserSerializer)
    @action(detail=True, methods=["post"], url_path="assign-packer")
    def assign_packer(self, request, pk=None):
        payload = AssignUserSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        delivery = services.assign_packer(
            delivery=self.get_object(), packer=payload.validated_data["user"], user=request.user
        )
        return self._document_response(delivery)

    @extend_schema(
        tags=["Delivery Endpoints"],
        summary="Record picked quantities",
        description="Omit `items` to pick every line at its full requested quantity.",
        request=PickPackSerializer,
        examples=[
            OpenApiExample("Partial pick", value={"items": [{"item_id": 12, "picked_quantity": 3}]}, request_only=True)
        ],
    )
    @action(detail=True, methods=["post"])
    def pick(self, request, pk=None):
        delivery = services.pick_delivery(delivery=self.get_object(), user=request.user, lines=self._lines(request))
        return self._document_response(delivery)

    @extend_schema(
        tags=["Delivery Endpoints"],
        summary="Record packed quantities",
        description="The delivery becomes ready once every line is packed in full.",
        request=PickPackSerializer,
    )
    @action(detail=True, methods=["post"])
    def pack(self, request, pk=None):
        delivery = services.pack_delivery(delivery=self.get_object(), user=request.user, lines=self._lines(request))
        return self._document_response(delivery)

    @extend_schema(
        tags=["Delivery Endpoints"],
        summary="Validate delivery",
        description="Checks every line against current stock, then decrements stock and marks the delivery done.",
        request=None,
    )
    @action(detail=True, methods=["post"])
    def validate(self, request, pk=None):
        delivery = services.validate_delivery(delivery=self.get_object(), user=request.user)
        return self._document_response(delivery)

    @extend_schema(tags=["Delivery Endpoints"], summary="My open picking and packing tasks")
    @action(detail=False, methods=["get"], url_path="my-tasks")
    def my_tasks(self, request):
        tasks = selectors.my_tasks(request.user)
        return Response(
            {
                "picking": self.get_serializer(tasks["picking"], many=True).data,
                "packing": self.get_serializer(tasks["packing"], many=True).data,
            }
        )


@_document_schema("Transfer Endpoints", "transfer")
class TransferViewSet(DocumentViewSet):
    serializer_class = TransferSerializer
    selector = staticmethod(selectors.transfers_for_user)
    filterset_fields = ["status", "source_location", "destination_location"]
    search_fields = ["number", "reference_number"]

    @extend_schema(
        tags=["Transfer Endpoints"],
        summary="Execute transfer",
        description="Moves every item from the source to the destination location and marks the transfer done.",
        request=None,
    )
    @action(detail=True, methods=["post"])
    def execute(self, request, pk=None):
        transfer = services.execute_transfer(transfer=self.get_object(), user=request.user)
        return self._document_response(transfer)


@_document_schema("Adjustment Endpoints", "adjustment")
class AdjustmentViewSet(DocumentViewSet):
    serializer_class = AdjustmentSerializer
    selector = staticmethod(selectors.adjustments_for_user)
    filterset_fields = ["status", "product", "location"]
    search_fields = ["number", "reason"]

    @extend_schema(
        tags=["Adjustment Endpoints"],
        summary="Validate adjustment",
        description="Sets stock at the location to the counted quantity and records the difference.",
        request=None,
    )
    @action(detail=True, methods=["post"])
    def validate(self, request, pk=None):
        adjustment = services.validate_adjustment(adjustment=self.get_object(), user=request.user)
        return self._document_response(adjustment)


# EOF
