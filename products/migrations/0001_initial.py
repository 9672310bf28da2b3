import products.models
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("sku", models.CharField(max_length=64, unique=True)),
                ("category", models.CharField(db_index=True, max_length=120)),
                ("uom", models.CharField(help_text="Unit of measure label, e.g. pcs, kg, box", max_length=32)),
                ("description", models.TextField(blank=True)),
                ("total_stock", models.IntegerField(default=0)),
                ("reorder_level", models.PositiveIntegerField(default=products.models.default_reorder_level)),
                ("reorder_quantity", models.PositiveIntegerField(default=products.models.default_reorder_quantity)),
                ("max_stock", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        db_index=True,
                        default="active",
                        max_length=16,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "id"],
                "indexes": [models.Index(fields=["status", "category"], name="product_status_category_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("total_stock__gte", 0)), name="product_total_stock_non_negative"
                    )
                ],
            },
        ),
    ]
