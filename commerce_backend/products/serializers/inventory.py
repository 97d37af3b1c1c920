# products/serializers/inventory.py

from rest_framework import serializers

from products.models import InventoryBatch, InventoryMovement


class InventoryBatchSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = InventoryBatch
        fields = [
            "id",
            "product",
            "product_name",
            "purchase_batch_item",
            "qty_in",
            "qty_available",
            "unit_cost",
            "received_at",
            "created_at",
        ]
        read_only_fields = fields


class InventoryMovementSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = InventoryMovement
        fields = [
            "id",
            "product",
            "product_name",
            "movement_type",
            "quantity",
            "reference_type",
            "reference_id",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class InventoryAdjustSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    direction = serializers.ChoiceField(choices=["IN", "OUT"])
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(max_length=255)
    unit_cost = serializers.DecimalField(max_digits=14, decimal_places=4, required=False, min_value=0)
