# supplies/serializers.py

from rest_framework import serializers

from supplies.models import Supply, SupplyPurchase, SupplyPurchaseItem


class SupplySerializer(serializers.ModelSerializer):
    is_below_minimum = serializers.SerializerMethodField()

    class Meta:
        model = Supply
        fields = [
            "id",
            "name",
            "unit_type",
            "stock",
            "min_stock",
            "unit_cost",
            "is_below_minimum",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "is_below_minimum", "created_at", "updated_at"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Name is required")

        request = self.context.get("request")
        qs = Supply.objects.filter(
            organization_id=request.user.organization_id,
            name__iexact=value,
        )
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A supply with this name already exists")
        return value

    def validate_unit_cost(self, value):
        if value < 0:
            raise serializers.ValidationError("unit_cost must be non-negative")
        return value

    def get_is_below_minimum(self, obj) -> bool:
        return obj.stock < obj.min_stock


class SupplyPurchaseItemCreateSerializer(serializers.Serializer):
    supply_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unit_cost = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=0)


class SupplyPurchaseCreateSerializer(serializers.Serializer):
    account_id = serializers.IntegerField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    purchased_at = serializers.DateTimeField(required=False, allow_null=True)
    items = SupplyPurchaseItemCreateSerializer(many=True, allow_empty=False)


class SupplyPurchaseItemSerializer(serializers.ModelSerializer):
    supply_name = serializers.CharField(source="supply.name", read_only=True)

    class Meta:
        model = SupplyPurchaseItem
        fields = ["id", "supply", "supply_name", "quantity", "unit_cost", "line_total"]
        read_only_fields = fields


class SupplyPurchaseSerializer(serializers.ModelSerializer):
    items = SupplyPurchaseItemSerializer(many=True, read_only=True)

    class Meta:
        model = SupplyPurchase
        fields = ["id", "account", "total", "notes", "purchased_at", "created_at", "items"]
        read_only_fields = fields
