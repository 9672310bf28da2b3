"""Serializers for user profile, registration, sign-in and user management.

- UserMeSerializer: read-only profile data for the authenticated user.
- RegistrationSerializer: action serializer to create warehouse-role users
  with Django password validation and unique email/username enforcement.
- EmailOrUsernameTokenObtainPairSerializer: obtain JWTs using email or username.
- UserAdminSerializer: admin-facing create/update including role and warehouse.
"""

from django.contrib.auth.password_validation import validate_password as run_password_validators
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken
from warehouses.models import Warehouse

from .models import User


class UserMeSerializer(serializers.ModelSerializer):
    """Serializer returning basic profile fields for the current user."""

    class Meta:
        model = User
        fields = ["id", "username", "email", "name", "role", "assigned_warehouse", "is_active"]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user reference embedded in documents and ledger rows."""

    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class RegistrationSerializer(serializers.Serializer):
    """Action serializer to register a new warehouse-role user.

    Validates uniqueness of `username` and `email` and enforces Django
    password validators. Uses `set_password` to hash provided password.
    """

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    password = serializers.CharField(write_only=True)

    def validate_username(self, value: str) -> str:
        """Ensure the username is not already taken (case-insensitive)."""
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username is already taken.")
        return value

    def validate_email(self, value: str) -> str:
        """Normalize and ensure the email is unique (case-insensitive)."""
        value = value.strip().lower()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email is already registered.")
        return value

    def validate_password(self, value: str) -> str:
        user = User(username=self.initial_data.get("username", ""), email=self.initial_data.get("email", ""))
        run_password_validators(value, user=user)
        return value

    def create(self, validated_data):
        user = User(
            username=validated_data["username"],
            email=validated_data["email"],
            name=validated_data.get("name", ""),
            role=User.ROLE_WAREHOUSE,
        )
        user.set_password(validated_data["password"])
        user.save()
        return user


class SignOutSerializer(serializers.Serializer):
    """Request body for signing out (blacklisting refresh token)."""

    refresh = serializers.CharField()


class EmailOrUsernameTokenObtainPairSerializer(serializers.Serializer):
    """Obtain JWTs by authenticating with either email or username.

    Accepts a single `identifier` field which may be an email address
    (case-insensitive) or a username, and a `password`.
    Returns `access` and `refresh` tokens plus the user's profile on success.
    """

    identifier = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = (attrs.get("identifier") or "").strip()
        password = attrs.get("password") or ""

        if not identifier or not password:
            raise serializers.ValidationError({"detail": "identifier and password are required."})

        lookup = {"email": identifier.lower()} if "@" in identifier else {"username__iexact": identifier}
        user = User.objects.filter(**lookup).first()

        if not user or not user.check_password(password) or not user.is_active:
            raise serializers.ValidationError({"detail": "Invalid credentials."})

        refresh = RefreshToken.for_user(user)
        refresh["role"] = user.role
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
            "user": UserMeSerializer(user).data,
        }


class UserAdminSerializer(serializers.ModelSerializer):
    """Admin create/update of users, including role and warehouse assignment."""

    password = serializers.CharField(write_only=True, required=False)
    assigned_warehouse = serializers.PrimaryKeyRelatedField(
        queryset=Warehouse.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "name",
            "role",
            "assigned_warehouse",
            "is_active",
            "password",
            "date_joined",
            "last_login",
        ]
        read_only_fields = ["id", "is_active", "date_joined", "last_login"]

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        qs = User.objects.filter(email=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Email is already registered.")
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        if attrs.get("password"):
            candidate = User(username=attrs.get("username", ""), email=attrs.get("email", ""))
            run_password_validators(attrs["password"], user=candidate)
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
