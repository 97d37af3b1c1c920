# purchases/api/serializers.py

from rest_framework import serializers

from purchases.models import PurchaseBatch, PurchaseBatchItem


class PurchaseItemCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unit_cost = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=0)


class PurchaseCreateSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    currency = serializers.CharField(max_length=3, required=False, allow_blank=True)
    exchange_rate = serializers.DecimalField(
        max_digits=14, decimal_places=6, required=False, allow_null=True
    )
    shipping = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, min_value=0, default=0
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    purchased_at = serializers.DateTimeField(required=False, allow_null=True)
    items = PurchaseItemCreateSerializer(many=True, allow_empty=False)


class PurchaseBatchItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = PurchaseBatchItem
        fields = (
            "id",
            "product",
            "product_name",
            "quantity",
            "unit_cost_source",
            "unit_cost",
            "total_cost",
        )
        read_only_fields = fields


class PurchaseBatchSerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source="account.name", read_only=True)
    items = PurchaseBatchItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseBatch
        fields = (
            "id",
            "account",
            "account_name",
            "currency",
            "exchange_rate",
            "subtotal",
            "shipping",
            "total",
            "notes",
            "purchased_at",
            "created_at",
            "items",
        )
        read_only_fields = fields
