from decimal import Decimal
import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Budget",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("current_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="budget",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Budget",
                "verbose_name_plural": "Budgets",
                "ordering": ["-updated_at"],
            },
        ),
        migrations.CreateModel(
            name="BudgetTransaction",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Signed amount: positive = inflow, negative = outflow",
                        max_digits=14,
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("top_up", "Top-up"),
                            ("batch_purchase", "Batch purchase"),
                            ("operational_cost", "Operational cost"),
                            ("operational_cost_refund", "Operational cost refund"),
                            ("item_sale", "Item sale"),
                            ("item_sale_reversal", "Item sale reversal"),
                            ("other", "Other"),
                        ],
                        max_length=32,
                    ),
                ),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("reference_id", models.UUIDField(blank=True, null=True)),
                (
                    "reference_type",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("", "None"),
                            ("batch", "Batch"),
                            ("item", "Item"),
                            ("operational_cost", "Operational cost"),
                        ],
                        default="",
                        max_length=32,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="budget_transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Budget Transaction",
                "verbose_name_plural": "Budget Transactions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="budget_tx_user_created_idx"),
                    models.Index(fields=["user", "kind"], name="budget_tx_user_kind_idx"),
                    models.Index(fields=["reference_id"], name="budget_tx_reference_idx"),
                    models.Index(fields=["kind"], name="budget_tx_kind_idx"),
                ],
            },
        ),
    ]
