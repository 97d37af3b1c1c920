# sales/serializers/sale.py

"""
SALE SERIALIZERS

- Write side (SaleCreateSerializer) only parses the cart; every money
  figure is computed by sales.services.sale_service.
- Read side expects `profits` ({sale id: profit}) in the serializer context,
  produced by reporting.services.profit, so list and detail agree.
"""

from decimal import Decimal

from rest_framework import serializers

from core.money import money
from reporting.services.profit import line_profit
from sales.models import Sale, SaleItem, SaleSupplyUsage
from sales.services.pricing import AMOUNT, PERCENT


class SaleItemInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    discount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, default=Decimal("0")
    )


class SupplyUsageInputSerializer(serializers.Serializer):
    supply_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unit_cost = serializers.DecimalField(
        max_digits=14, decimal_places=4, min_value=0, required=False, allow_null=True
    )


class SaleCreateSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    customer_id = serializers.IntegerField(required=False, allow_null=True)
    event_id = serializers.IntegerField(required=False, allow_null=True)
    payment_method = serializers.ChoiceField(
        choices=Sale.PaymentMethod.choices, required=False, default=Sale.PaymentMethod.CASH
    )
    discount_type = serializers.ChoiceField(
        choices=[AMOUNT, PERCENT], required=False, allow_blank=True, allow_null=True
    )
    discount_value = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    shipping_cost = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, default=Decimal("0")
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    sold_at = serializers.DateTimeField(required=False, allow_null=True)
    items = SaleItemInputSerializer(many=True, allow_empty=False)
    supplies_used = SupplyUsageInputSerializer(many=True, required=False, default=list)


class SaleItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    profit = serializers.SerializerMethodField()

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "product",
            "product_name",
            "quantity",
            "unit_price",
            "unit_cost",
            "discount",
            "line_total",
            "profit",
        ]
        read_only_fields = fields

    def get_profit(self, obj) -> Decimal:
        return money(line_profit(obj.line_total, obj.unit_cost, obj.quantity))


class SaleSupplyUsageSerializer(serializers.ModelSerializer):
    supply_name = serializers.CharField(source="supply.name", read_only=True)

    class Meta:
        model = SaleSupplyUsage
        fields = ["id", "supply", "supply_name", "quantity", "unit_cost", "line_total"]
        read_only_fields = fields


class SaleListSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)
    account_name = serializers.CharField(source="account.name", read_only=True)
    items_count = serializers.IntegerField(read_only=True, default=0)
    profit = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            "id",
            "sale_number",
            "customer",
            "customer_name",
            "event",
            "account",
            "account_name",
            "subtotal",
            "discount",
            "tax",
            "shipping_cost",
            "total",
            "payment_method",
            "sold_at",
            "notes",
            "items_count",
            "profit",
        ]
        read_only_fields = fields

    def get_profit(self, obj):
        profits = self.context.get("profits") or {}
        return profits.get(obj.pk)


class SaleDetailSerializer(SaleListSerializer):
    items = SaleItemSerializer(many=True, read_only=True)
    supplies = SaleSupplyUsageSerializer(source="supplies_used", many=True, read_only=True)

    class Meta(SaleListSerializer.Meta):
        fields = SaleListSerializer.Meta.fields + [
            "discount_type",
            "discount_value",
            "tax_rate",
            "created_at",
            "items",
            "supplies",
        ]
        read_only_fields = fields
