import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def money_validators():
    return [django.core.validators.MinValueValidator(Decimal("0.00"))]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="UserSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("currency", models.CharField(default="DZD", max_length=3)),
                ("language", models.CharField(choices=[("en", "English"), ("ar", "Arabic"), ("fr", "French")], default="en", max_length=2)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="settings", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name_plural": "User settings",
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("income", "Income"), ("expense", "Expense")], max_length=10)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, validators=money_validators())),
                ("category", models.CharField(max_length=100)),
                ("date", models.DateField()),
                ("name", models.CharField(blank=True, default="", max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("account_type", models.CharField(blank=True, choices=[("ccp", "CCP"), ("cash", "Cash"), ("creditcard", "Credit card")], default="", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="transactions", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["user", "date"], name="idx_transaction_user_date"),
                    models.Index(fields=["user", "type"], name="idx_transaction_user_type"),
                    models.Index(fields=["user", "category"], name="idx_transaction_user_category"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gte", 0)), name="transaction_amount_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BudgetAllocation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("category", models.CharField(default="plan", max_length=100)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, validators=money_validators())),
                ("period", models.CharField(choices=[("weekly", "Weekly"), ("monthly", "Monthly"), ("yearly", "Yearly")], default="monthly", max_length=10)),
                ("savings", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12, validators=money_validators())),
                ("necessities", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12, validators=money_validators())),
                ("wants", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12, validators=money_validators())),
                ("investments", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12, validators=money_validators())),
                ("savings_percent", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("necessities_percent", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("wants_percent", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("investments_percent", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("ai_recommendation", models.TextField(blank=True, default="")),
                ("generated_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="budget_allocations", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["category"],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "category"), name="unique_budget_category_per_user"),
                    models.CheckConstraint(condition=models.Q(("amount__gte", 0)), name="budget_amount_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Goal",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("title", models.CharField(blank=True, default="", max_length=255)),
                ("type", models.CharField(choices=[("financial", "Financial"), ("personal", "Personal"), ("savings", "Savings")], default="financial", max_length=20)),
                ("description", models.TextField(blank=True, default="")),
                ("target", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12, validators=money_validators())),
                ("current", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12, validators=money_validators())),
                ("deadline", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="goals", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["deadline", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("client", models.CharField(blank=True, default="", max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("status", models.CharField(choices=[("ongoing", "Ongoing"), ("completed", "Completed"), ("paused", "Paused"), ("cancelled", "Cancelled")], default="ongoing", max_length=20)),
                ("expected_earnings", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12, validators=money_validators())),
                ("hours_spent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=8, validators=money_validators())),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="projects", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Debt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("given", "Given"), ("received", "Received")], max_length=10)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, validators=money_validators())),
                ("person_name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("date", models.DateField()),
                ("status", models.CharField(choices=[("pending", "Pending"), ("paid", "Paid"), ("received", "Received")], default="pending", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="debts", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["user", "type", "status"], name="idx_debt_user_type_status"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gte", 0)), name="debt_amount_non_negative"),
                ],
            },
        ),
    ]
