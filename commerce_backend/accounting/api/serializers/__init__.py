# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import (
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
)
from accounting.api.serializers.transactions import (
    TransactionCreateSerializer,
    TransactionSerializer,
)

__all__ = [
    "AccountSerializer",
    "AccountCreateSerializer",
    "AccountUpdateSerializer",
    "TransactionSerializer",
    "TransactionCreateSerializer",
]
