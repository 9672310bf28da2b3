from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

STATUS_CHOICES = [
    ("draft", "Draft"),
    ("waiting", "Waiting"),
    ("picking", "Picking"),
    ("packing", "Packing"),
    ("ready", "Ready"),
    ("done", "Done"),
    ("canceled", "Canceled"),
]


def document_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("number", models.CharField(blank=True, db_index=True, max_length=32, null=True, unique=True)),
        ("status", models.CharField(choices=STATUS_CHOICES, db_index=True, default="draft", max_length=16)),
        ("notes", models.TextField(blank=True)),
        ("canceled_at", models.DateTimeField(blank=True, null=True)),
        (
            "created_by",
            models.ForeignKey(
                on_delete=django.db.models.deletion.PROTECT, related_name="+", to=settings.AUTH_USER_MODEL
            ),
        ),
    ]


def stamp_user(name):
    return (
        name,
        models.ForeignKey(
            blank=True,
            null=True,
            on_delete=django.db.models.deletion.PROTECT,
            related_name="+",
            to=settings.AUTH_USER_MODEL,
        ),
    )


def positive_quantity():
    return models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0001_initial"),
        ("warehouses", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Receipt",
            fields=document_fields()
            + [
                ("supplier", models.CharField(max_length=200)),
                ("supplier_email", models.EmailField(blank=True, max_length=254)),
                ("supplier_phone", models.CharField(blank=True, max_length=32)),
                ("receipt_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("expected_date", models.DateTimeField(blank=True, null=True)),
                ("reference_number", models.CharField(blank=True, max_length=100)),
                ("validated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "warehouse",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="receipts",
                        to="warehouses.warehouse",
                    ),
                ),
                stamp_user("validated_by"),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["warehouse", "status"], name="receipt_warehouse_status_idx"),
                    models.Index(fields=["supplier"], name="receipt_supplier_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReceiptItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", positive_quantity()),
                ("expected_quantity", models.PositiveIntegerField(blank=True, null=True)),
                ("unit_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("notes", models.CharField(blank=True, max_length=255)),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="+", to="warehouses.location"
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="+", to="products.product"
                    ),
                ),
                (
                    "receipt",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="items", to="movements.receipt"
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)), name="receiptitem_quantity_positive"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("unit_price__gte", 0)), name="receiptitem_price_non_negative"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Delivery",
            fields=document_fields()
            + [
                ("customer", models.CharField(max_length=200)),
                ("customer_email", models.EmailField(blank=True, max_length=254)),
                ("customer_phone", models.CharField(blank=True, max_length=32)),
                ("shipping_address", models.TextField(blank=True)),
                ("scheduled_date", models.DateTimeField(blank=True, null=True)),
                ("reference_number", models.CharField(blank=True, max_length=100)),
                ("picked_at", models.DateTimeField(blank=True, null=True)),
                ("packed_at", models.DateTimeField(blank=True, null=True)),
                ("validated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "packer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="packing_tasks",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "picker",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="picking_tasks",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                stamp_user("validated_by"),
                (
                    "warehouse",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="deliveries",
                        to="warehouses.warehouse",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "deliveries",
                "ordering": ["-created_at", "-id"],
                "indexes": [models.Index(fields=["warehouse", "status"], name="delivery_warehouse_status_idx")],
            },
        ),
        migrations.CreateModel(
            name="DeliveryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", positive_quantity()),
                ("picked_quantity", models.PositiveIntegerField(default=0)),
                ("packed_quantity", models.PositiveIntegerField(default=0)),
                (
                    "delivery",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="items", to="movements.delivery"
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="+", to="warehouses.location"
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="+", to="products.product"
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)), name="deliveryitem_quantity_positive"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Transfer",
            fields=document_fields()
            + [
                ("scheduled_date", models.DateTimeField(blank=True, null=True)),
                ("reference_number", models.CharField(blank=True, max_length=100)),
                ("executed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "destination_location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="+", to="warehouses.location"
                    ),
                ),
                stamp_user("executed_by"),
                (
                    "source_location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="+", to="warehouses.location"
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("source_location", models.F("destination_location")), _negated=True),
                        name="transfer_distinct_locations",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="TransferItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", positive_quantity()),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="+", to="products.product"
                    ),
                ),
                (
                    "transfer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="items", to="movements.transfer"
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)), name="transferitem_quantity_positive"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Adjustment",
            fields=document_fields()
            + [
                ("system_quantity", models.PositiveIntegerField(default=0)),
                ("counted_quantity", models.PositiveIntegerField()),
                ("difference", models.IntegerField(default=0)),
                ("reason", models.CharField(max_length=255)),
                ("validated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="adjustments",
                        to="warehouses.location",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="adjustments",
                        to="products.product",
                    ),
                ),
                stamp_user("validated_by"),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
