import json

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from finance.services.transaction_service import TransactionService

User = get_user_model()


class Command(BaseCommand):
    help = (
        "Import a JSON ledger export (list of income/expense records) for one user. "
        "Negative legacy amounts are stored as magnitudes."
    )

    def add_arguments(self, parser):
        parser.add_argument("path", help="Path to the JSON export file")
        parser.add_argument(
            "--email",
            required=True,
            help="Email of the user owning the imported transactions",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Validate the file without storing anything",
        )

    def handle(self, *args, **options):
        try:
            user = User.objects.get(email__iexact=options["email"])
        except User.DoesNotExist as e:
            raise CommandError(f"No user with email {options['email']}") from e

        try:
            with open(options["path"], encoding="utf-8") as export_file:
                records = json.load(export_file)
        except OSError as e:
            raise CommandError(f"Cannot read {options['path']}: {e}") from e
        except json.JSONDecodeError as e:
            raise CommandError(f"{options['path']} is not valid JSON: {e}") from e

        # Exports of the previous system wrap the list in {"transactions": [...]}
        if isinstance(records, dict):
            records = records.get("transactions", [])
        if not isinstance(records, list):
            raise CommandError("Expected a list of transaction records")

        self.stdout.write(f"Found {len(records)} records for {user.email}")

        if options["dry_run"]:
            _, errors, normalized = TransactionService.prepare_records(records, user)
            for error in errors:
                self.stdout.write(self.style.ERROR(error))
            if errors:
                raise CommandError(f"{len(errors)} invalid records")
            self.stdout.write(
                self.style.SUCCESS(
                    f"Dry run OK: {len(records)} records valid, {normalized} would be normalized"
                )
            )
            return

        try:
            result = TransactionService.bulk_import_transactions(records, user)
        except ValidationError as e:
            for message in e.messages:
                self.stdout.write(self.style.ERROR(message))
            raise CommandError(f"{len(e.messages)} invalid records, nothing imported") from e

        if result["normalized"]:
            self.stdout.write(
                self.style.WARNING(
                    f"{result['normalized']} negative amounts were normalized to magnitudes"
                )
            )
        self.stdout.write(
            self.style.SUCCESS(f"Imported {len(result['created'])} transactions")
        )
