from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from users.services import RoleService

User = get_user_model()


class Command(BaseCommand):
    help = "Revoke a role (default: the configured admin role) from a user"

    def add_arguments(self, parser):
        parser.add_argument("email", help="Email of the user losing the role")
        parser.add_argument(
            "--role",
            help="Role name (defaults to settings.APP_ADMIN_ROLE)",
        )

    def handle(self, *args, **options):
        role = options.get("role") or settings.APP_ADMIN_ROLE
        try:
            user = User.objects.get(email__iexact=options["email"])
        except User.DoesNotExist as e:
            raise CommandError(f"No user with email {options['email']}") from e

        try:
            revoked = RoleService.revoke_role(user, role)
        except ValidationError as e:
            raise CommandError("; ".join(e.messages)) from e

        if revoked:
            self.stdout.write(self.style.SUCCESS(f"Revoked role '{role}' from {user.email}"))
        else:
            self.stdout.write(self.style.WARNING(f"{user.email} does not hold role '{role}'"))
