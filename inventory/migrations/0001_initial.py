import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0001_initial"),
        ("warehouses", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StockLevel",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("quantity", models.IntegerField(default=0)),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_levels",
                        to="warehouses.location",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_levels",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["product_id", "location_id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("product", "location"), name="unique_stocklevel_per_product_location"
                    ),
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 0)), name="stocklevel_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockLedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "movement_type",
                    models.CharField(
                        choices=[
                            ("receipt", "Receipt"),
                            ("delivery", "Delivery"),
                            ("transfer", "Transfer"),
                            ("adjustment", "Adjustment"),
                        ],
                        db_index=True,
                        max_length=16,
                    ),
                ),
                ("document_id", models.PositiveBigIntegerField(db_index=True)),
                ("document_number", models.CharField(db_index=True, max_length=32)),
                ("quantity", models.IntegerField()),
                ("quantity_before", models.IntegerField()),
                ("quantity_after", models.IntegerField()),
                ("reference", models.CharField(blank=True, max_length=200)),
                ("notes", models.TextField(blank=True)),
                ("movement_date", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "destination_location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="warehouses.location",
                    ),
                ),
                (
                    "destination_warehouse",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="warehouses.warehouse",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="warehouses.location",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="products.product",
                    ),
                ),
                (
                    "source_location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="warehouses.location",
                    ),
                ),
                (
                    "source_warehouse",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="warehouses.warehouse",
                    ),
                ),
                (
                    "warehouse",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="warehouses.warehouse",
                    ),
                ),
            ],
            options={
                "ordering": ["-movement_date", "-id"],
                "indexes": [
                    models.Index(fields=["product", "movement_date"], name="ledger_product_date_idx"),
                    models.Index(fields=["warehouse", "movement_date"], name="ledger_warehouse_date_idx"),
                    models.Index(fields=["movement_type", "document_id"], name="ledger_type_document_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("quantity_after", models.F("quantity_before") + models.F("quantity"))
                        ),
                        name="ledger_quantity_reconciles",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_before__gte", 0)), name="ledger_before_non_negative"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_after__gte", 0)), name="ledger_after_non_negative"
                    ),
                ],
            },
        ),
    ]
