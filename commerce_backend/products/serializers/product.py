# products/serializers/product.py

"""
PRODUCT SERIALIZER

- Stock is derived from InventoryBatch only (single source of truth).
- Views annotate `stock` / `stock_value` (ProductQuerySet.with_stock) to avoid N+1.
"""

from django.conf import settings
from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - No frontend-side stock math
    - stock / stock_value / is_low_stock are read-only
    """

    stock = serializers.IntegerField(read_only=True, default=0)
    stock_value = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True, default=0)
    is_low_stock = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "price",
            "low_stock_threshold",
            "stock",
            "stock_value",
            "is_low_stock",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "stock",
            "stock_value",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]

    def validate_sku(self, value):
        return (value or "").strip().upper()

    def validate_price(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("Price must be non-negative")
        return value

    def get_is_low_stock(self, obj) -> bool:
        threshold = obj.low_stock_threshold
        if threshold is None:
            threshold = settings.LOW_STOCK_THRESHOLD
        return int(getattr(obj, "stock", 0) or 0) < threshold
