"""
Django admin configuration for users and role assignments.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser, RoleAssignment, UserProfile


class RoleAssignmentInline(admin.TabularInline):
    model = RoleAssignment
    fk_name = "user"
    extra = 0
    readonly_fields = ("granted_at", "granted_by")


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    readonly_fields = ("updated_at",)


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    """Default UserAdmin extended with the social flag and role inline."""

    list_display = ("email", "username", "is_social_account", "is_staff", "is_active")
    search_fields = ("email", "username", "first_name", "last_name")
    ordering = ("email",)
    inlines = [UserProfileInline, RoleAssignmentInline]

    fieldsets = UserAdmin.fieldsets + (
        ("Sign-in", {"fields": ("is_social_account", "avatar_url")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "username", "password1", "password2"),
            },
        ),
    )


@admin.register(RoleAssignment)
class RoleAssignmentAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "is_active", "granted_by", "granted_at")
    list_filter = ("role", "is_active")
    search_fields = ("user__email", "role")
    raw_id_fields = ("user", "granted_by")
