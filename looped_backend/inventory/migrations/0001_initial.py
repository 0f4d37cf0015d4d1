from decimal import Decimal
import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Batch",
            fields=[
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("purchase_date", models.DateField(default=django.utils.timezone.localdate)),
                ("total_items", models.PositiveIntegerField(default=0)),
                ("total_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_sold", models.PositiveIntegerField(default=0)),
                ("total_revenue", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="batches",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-purchase_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["user", "purchase_date"], name="inv_batch_user_date_idx"),
                    models.Index(fields=["deleted_at"], name="inv_batch_deleted_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("category", models.CharField(blank=True, default="", max_length=100)),
                ("purchase_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("selling_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("margin_value", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("margin_percentage", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                (
                    "sold_status",
                    models.CharField(
                        choices=[("unsold", "Unsold"), ("sold", "Sold")],
                        default="unsold",
                        max_length=10,
                    ),
                ),
                ("total_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("image_ref", models.CharField(blank=True, default="", max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "batch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="items",
                        to="inventory.batch",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inventory_items",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "sold_status"], name="inv_item_user_status_idx"),
                    models.Index(fields=["batch", "deleted_at"], name="inv_item_batch_deleted_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OperationalCost",
            fields=[
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("category", models.CharField(default="general", max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "batch",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="operational_costs",
                        to="inventory.batch",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="operational_costs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["user", "date"], name="inv_cost_user_date_idx"),
                    models.Index(fields=["batch", "deleted_at"], name="inv_cost_batch_deleted_idx"),
                ],
            },
        ),
    ]
