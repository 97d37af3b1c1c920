# products/filters.py

import django_filters

from products.models import InventoryBatch


class InventoryBatchFilter(django_filters.FilterSet):
    """
    ?product_id=<id>   layers of one product
    ?open=true         only layers with qty_available > 0
    """

    product_id = django_filters.NumberFilter(field_name="product_id")
    open = django_filters.BooleanFilter(method="filter_open")

    class Meta:
        model = InventoryBatch
        fields = ["product_id", "open"]

    def filter_open(self, queryset, name, value):
        if value:
            return queryset.filter(qty_available__gt=0)
        return queryset
