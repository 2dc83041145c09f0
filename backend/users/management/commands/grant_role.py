from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from users.services import RoleService

User = get_user_model()


class Command(BaseCommand):
    help = "Grant a role (default: the configured admin role) to a user"

    def add_arguments(self, parser):
        parser.add_argument("email", help="Email of the user receiving the role")
        parser.add_argument(
            "--role",
            help="Role name (defaults to settings.APP_ADMIN_ROLE)",
        )
        parser.add_argument(
            "--granted-by",
            dest="granted_by",
            help="Email of the user recorded as granting the role",
        )

    def handle(self, *args, **options):
        role = options.get("role") or settings.APP_ADMIN_ROLE
        user = self._get_user(options["email"])
        granted_by = (
            self._get_user(options["granted_by"]) if options.get("granted_by") else None
        )

        try:
            assignment, created = RoleService.grant_role(user, role, granted_by=granted_by)
        except ValidationError as e:
            raise CommandError("; ".join(e.messages)) from e

        if created:
            self.stdout.write(
                self.style.SUCCESS(f"Granted role '{assignment.role}' to {user.email}")
            )
        else:
            self.stdout.write(
                self.style.WARNING(f"{user.email} already holds role '{assignment.role}'")
            )

    def _get_user(self, email):
        try:
            return User.objects.get(email__iexact=email)
        except User.DoesNotExist as e:
            raise CommandError(f"No user with email {email}") from e
