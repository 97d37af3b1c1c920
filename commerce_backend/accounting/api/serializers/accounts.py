# accounting/api/serializers/accounts.py

from decimal import Decimal

from rest_framework import serializers

from accounting.models import Account


class AccountSerializer(serializers.ModelSerializer):
    """
    Read-only account representation (balance is ledger-managed).
    """

    class Meta:
        model = Account
        fields = ("id", "name", "type", "account_number", "balance", "is_active", "created_at")
        read_only_fields = fields


class AccountCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    type = serializers.ChoiceField(choices=Account.Type.choices, default=Account.Type.CASH)
    account_number = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    opening_balance = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, default=Decimal("0.00")
    )


class AccountUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150, required=False)
    type = serializers.ChoiceField(choices=Account.Type.choices, required=False)
    account_number = serializers.CharField(max_length=64, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
