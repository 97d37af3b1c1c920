# accounting/api/serializers/transactions.py

from decimal import Decimal

from rest_framework import serializers

from accounting.models import Transaction


class TransactionSerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source="account.name", read_only=True)
    to_account_name = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = (
            "id",
            "type",
            "account",
            "account_name",
            "to_account",
            "to_account_name",
            "amount",
            "category",
            "description",
            "reference_type",
            "reference_id",
            "occurred_at",
            "created_at",
        )
        read_only_fields = fields

    def get_to_account_name(self, obj):
        return getattr(getattr(obj, "to_account", None), "name", None)


class TransactionCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Transaction.Type.choices)
    account_id = serializers.IntegerField()
    to_account_id = serializers.IntegerField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    occurred_at = serializers.DateTimeField(required=False, allow_null=True)
