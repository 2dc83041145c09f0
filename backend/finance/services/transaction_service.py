"""
Service for bulk transaction ingestion.

Used by the ``import_transactions`` management command to load ledger exports
of the previous system. Legacy exports may carry expenses as negative
amounts; those are normalized to their magnitude before insert, everything
else that breaks the ledger invariants is rejected.
"""

import logging
from datetime import date, datetime

from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction
from django.utils.dateparse import parse_date, parse_datetime

from ..models import Transaction
from ..utils.money_utils import fractional_digits, to_decimal

# Get structured logger for this module
logger = logging.getLogger(__name__)

TRANSACTION_TYPES = {choice for choice, _ in Transaction.TRANSACTION_TYPES}
ACCOUNT_TYPES = {choice for choice, _ in Transaction.ACCOUNT_TYPES}


class TransactionService:
    """
    Service for importing transactions atomically.

    Either every record of an import is stored or none is.
    """

    @staticmethod
    def _parse_date(value):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            parsed = parse_date(value)
            if parsed is None:
                parsed_dt = parse_datetime(value)
                parsed = parsed_dt.date() if parsed_dt else None
            return parsed
        return None

    @staticmethod
    def normalize_record(data):
        """
        Validate one exported record and map it onto Transaction fields.

        Returns:
            tuple: (field dict, bool telling whether the amount was negative)

        Raises:
            ValidationError: if the record cannot be imported
        """
        tx_type = str(data.get("type", "")).strip().lower()
        if tx_type not in TRANSACTION_TYPES:
            raise ValidationError(f"type must be 'income' or 'expense', got {data.get('type')!r}")

        amount = to_decimal(data.get("amount"))
        if amount is None:
            raise ValidationError(f"amount {data.get('amount')!r} is not a number")

        normalized = amount < 0
        amount = abs(amount)
        if fractional_digits(amount) > 2:
            raise ValidationError(f"amount {amount} has more than 2 decimal places")

        category = str(data.get("category") or "").strip()
        if not category:
            raise ValidationError("category is required")

        tx_date = TransactionService._parse_date(data.get("date"))
        if tx_date is None:
            raise ValidationError(f"date {data.get('date')!r} is not a valid date")

        account_type = str(data.get("account_type") or "").strip().lower()
        if account_type and account_type not in ACCOUNT_TYPES:
            raise ValidationError(f"account_type {account_type!r} is not supported")

        fields = {
            "type": tx_type,
            "amount": amount,
            "category": category,
            "date": tx_date,
            "name": str(data.get("name") or data.get("source") or "").strip()[:255],
            "description": str(data.get("description") or data.get("note") or ""),
            "account_type": account_type,
        }
        return fields, normalized

    @staticmethod
    def prepare_records(records, user):
        """
        Normalize every record without touching the database.

        Returns:
            tuple: (unsaved Transaction list, error messages, normalized count)
        """
        prepared = []
        validation_errors = []
        normalized_count = 0

        for i, data in enumerate(records):
            if not isinstance(data, dict):
                validation_errors.append(f"Record {i}: expected an object")
                continue
            try:
                fields, normalized = TransactionService.normalize_record(data)
            except ValidationError as e:
                validation_errors.append(f"Record {i}: {'; '.join(e.messages)}")
                continue

            if normalized:
                normalized_count += 1
                logger.warning(
                    "Negative legacy amount normalized to its magnitude",
                    extra={
                        "user_id": user.id,
                        "record_index": i,
                        "original_amount": str(data.get("amount")),
                        "action": "legacy_amount_normalized",
                        "component": "TransactionService",
                        "severity": "low",
                    },
                )
            prepared.append(Transaction(user=user, **fields))

        return prepared, validation_errors, normalized_count

    @staticmethod
    @db_transaction.atomic
    def bulk_import_transactions(records, user):
        """
        Validate every record, then insert them all in one transaction.

        Args:
            records: list of dicts as exported by the previous system
            user: owner of the imported transactions

        Returns:
            dict: ``created`` (list of Transaction) and ``normalized`` (count of
            negative amounts turned into magnitudes)

        Raises:
            ValidationError: listing every invalid record; nothing is stored
        """
        logger.info(
            "Importing transactions",
            extra={
                "user_id": user.id,
                "record_count": len(records),
                "action": "bulk_import_start",
                "component": "TransactionService",
            },
        )

        prepared, validation_errors, normalized_count = TransactionService.prepare_records(
            records, user
        )

        if validation_errors:
            logger.error(
                "Transaction import validation failed",
                extra={
                    "user_id": user.id,
                    "error_count": len(validation_errors),
                    "errors": validation_errors,
                    "action": "bulk_import_validation_failed",
                    "component": "TransactionService",
                    "severity": "high",
                },
            )
            raise ValidationError(validation_errors)

        created = Transaction.objects.bulk_create(prepared)

        logger.info(
            "Transactions imported",
            extra={
                "user_id": user.id,
                "created_count": len(created),
                "normalized_count": normalized_count,
                "action": "bulk_import_success",
                "component": "TransactionService",
            },
        )
        return {"created": created, "normalized": normalized_count}
