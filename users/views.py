"""Users app API views.

Endpoints include:
- profile: returns the current authenticated user's profile.
- signup: creates a new warehouse-role user.
- signin/refresh/verify/signout: JWT lifecycle.
- users: admin-only user management with activate/deactivate actions.
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes, throttle_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView, TokenVerifyView

from .logging import log_auth_event
from .models import User
from .permissions import IsAdmin
from .serializers import (
    EmailOrUsernameTokenObtainPairSerializer,
    RegistrationSerializer,
    SignOutSerializer,
    UserAdminSerializer,
    UserMeSerializer,
)


@extend_schema(
    operation_id="users_current_user",
    summary="Get current user profile",
    description=(
        "Returns the current authenticated user's profile.\n\n"
        "Auth: Requires JWT (Authorization: Bearer <token>) or session auth.\n\n"
        "Errors: 401 if authentication credentials are missing or invalid."
    ),
    tags=["User Endpoints"],
    responses={
        200: OpenApiResponse(description="User profile", response=UserMeSerializer),
        401: OpenApiResponse(description="Unauthorized"),
    },
)
@api_view(["GET"])
@permission_classes([IsAuthenticated])
@throttle_classes([ScopedRateThrottle])
def current_user(request):
    """Return the authenticated user's profile fields."""
    log_auth_event("profile", request, user=request.user)
    serializer = UserMeSerializer(request.user)
    return Response(serializer.data)


current_user.throttle_scope = "profile"


@extend_schema(tags=["User Endpoints"], request=RegistrationSerializer, responses={201: UserMeSerializer})
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def register(request):
    """Register a new warehouse-role user."""
    serializer = RegistrationSerializer(data=request.data)
    try:
        serializer.is_valid(raise_exception=True)
    except ValidationError:
        log_auth_event("register", request, status="invalid")
        raise
    user = serializer.save()
    log_auth_event("register", request, user=user, status="success")
    return Response(UserMeSerializer(user).data, status=status.HTTP_201_CREATED)


register.throttle_scope = "register"


class SignOutView(APIView):
    """Blacklist a refresh token."""

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signout"
    permission_classes = [AllowAny]

    @extend_schema(tags=["User Endpoints"], request=SignOutSerializer)
    def post(self, request):
        serializer = SignOutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            token = RefreshToken(serializer.validated_data["refresh"])
            token.blacklist()
        except TokenError:
            log_auth_event("signout", request, status="invalid_token")
            return Response({"success": False, "message": "Invalid token."}, status=status.HTTP_400_BAD_REQUEST)
        log_auth_event("signout", request, status="success")
        return Response({"success": True, "message": "Signed out."}, status=status.HTTP_205_RESET_CONTENT)


class SignInView(TokenObtainPairView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signin"
    serializer_class = EmailOrUsernameTokenObtainPairSerializer

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("signin", request, status=status_label)
        return resp


class RefreshView(TokenRefreshView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token_refresh"

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("token_refresh", request, status=status_label)
        return resp


class VerifyView(TokenVerifyView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token_verify"

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("token_verify", request, status=status_label)
        return resp


@extend_schema_view(
    list=extend_schema(
        tags=["User Management"],
        summary="List users",
        parameters=[
            OpenApiParameter(name="role", description="admin, manager or warehouse", required=False, type=str),
            OpenApiParameter(name="is_active", description="true/false", required=False, type=str),
            OpenApiParameter(name="search", description="Name, username or email", required=False, type=str),
        ],
    ),
    retrieve=extend_schema(tags=["User Management"], summary="Get user"),
    create=extend_schema(tags=["User Management"], summary="Create user"),
    update=extend_schema(tags=["User Management"], summary="Update user"),
    partial_update=extend_schema(tags=["User Management"], summary="Partial update user"),
)
class UserAdminViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Admin-only user management. Users are deactivated, never deleted."""

    permission_classes = [IsAdmin]
    serializer_class = UserAdminSerializer

    def get_queryset(self):
        qs = User.objects.select_related("assigned_warehouse").order_by("-date_joined", "id")
        role = self.request.query_params.get("role")
        is_active = self.request.query_params.get("is_active")
        search = self.request.query_params.get("search")
        if role:
            qs = qs.filter(role=role)
        if is_active in ("true", "false"):
            qs = qs.filter(is_active=is_active == "true")
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(username__icontains=search) | Q(email__icontains=search))
        return qs

    def perform_create(self, serializer):
        user = serializer.save()
        log_auth_event("user_created", self.request, user=user, extra={"role": user.role})

    @extend_schema(tags=["User Management"], summary="Activate user", request=None, responses=UserAdminSerializer)
    @action(detail=True, methods=["patch", "post"])
    def activate(self, request, pk=None):
        return self._set_active(request, True)

    @extend_schema(tags=["User Management"], summary="Deactivate user", request=None, responses=UserAdminSerializer)
    @action(detail=True, methods=["patch", "post"])
    def deactivate(self, request, pk=None):
        return self._set_active(request, False)

    def _set_active(self, request, active: bool):
        user = self.get_object()
        if not active and user.pk == request.user.pk:
            return Response(
                {"success": False, "message": "You cannot deactivate your own account."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        user.is_active = active
        user.save(update_fields=["is_active"])
        log_auth_event("user_activated" if active else "user_deactivated", request, user=user)
        return Response(self.get_serializer(user).data)
