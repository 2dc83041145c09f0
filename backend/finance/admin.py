from django.contrib import admin

from .models import BudgetAllocation, Debt, Goal, Project, Transaction, UserSettings


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("date", "user", "type", "amount", "category", "account_type")
    list_filter = ("type", "account_type", "date")
    search_fields = ("category", "name", "description", "user__email")
    date_hierarchy = "date"
    raw_id_fields = ("user",)


@admin.register(BudgetAllocation)
class BudgetAllocationAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "category",
        "period",
        "amount",
        "savings",
        "necessities",
        "wants",
        "investments",
        "updated_at",
    )
    list_filter = ("period",)
    search_fields = ("category", "user__email")
    readonly_fields = ("generated_at", "created_at", "updated_at")
    raw_id_fields = ("user",)


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "type", "target", "current", "deadline")
    list_filter = ("type",)
    search_fields = ("name", "title", "user__email")


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "client", "status", "expected_earnings", "hours_spent")
    list_filter = ("status",)
    search_fields = ("name", "client", "user__email")


@admin.register(Debt)
class DebtAdmin(admin.ModelAdmin):
    list_display = ("person_name", "user", "type", "amount", "status", "date")
    list_filter = ("type", "status")
    search_fields = ("person_name", "user__email")


@admin.register(UserSettings)
class UserSettingsAdmin(admin.ModelAdmin):
    list_display = ("user", "currency", "language")
    list_filter = ("language",)
