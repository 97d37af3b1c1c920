# core/transactions.py

"""
SCOPED TRANSACTION

One abstraction for every multi-row command (sales, purchases, transfers,
supply restocks):

    with atomic_operation("sale"):
        ...all writes...

Rules:
- Everything inside commits together or rolls back together.
- Domain errors (CommerceError) propagate unchanged.
- Model validation (full_clean raising django's ValidationError) is a
  caller error: it becomes core.errors.ValidationError (400), same message.
- Any other exception is logged with its traceback and re-raised as
  TransactionFailure chained to the original.
- No compensating deletes: rollback is the database's job.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from core.errors import CommerceError, TransactionFailure, ValidationError

logger = logging.getLogger(__name__)


def _validation_message(exc: DjangoValidationError) -> str:
    if hasattr(exc, "message_dict"):
        return "; ".join(
            f"{field}: {' '.join(messages)}" if field != "__all__" else " ".join(messages)
            for field, messages in exc.message_dict.items()
        )
    return " ".join(exc.messages)


@contextmanager
def atomic_operation(name: str, *, using: str | None = None):
    try:
        with transaction.atomic(using=using):
            yield
    except CommerceError:
        raise
    except DjangoValidationError as exc:
        logger.info("%s rejected by model validation: %s", name, exc.messages)
        raise ValidationError(_validation_message(exc)) from exc
    except Exception as exc:
        logger.exception("%s failed; transaction rolled back", name)
        raise TransactionFailure() from exc
