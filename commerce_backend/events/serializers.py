# events/serializers.py

from decimal import Decimal

from rest_framework import serializers

from events.models import Event


class EventSerializer(serializers.ModelSerializer):
    status = serializers.CharField(read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "name",
            "location",
            "starts_at",
            "ends_at",
            "fixed_cost",
            "notes",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "status", "created_at", "updated_at"]

    def validate_fixed_cost(self, value):
        if value < 0:
            raise serializers.ValidationError("fixed_cost must be non-negative")
        return value

    def validate(self, attrs):
        starts_at = attrs.get("starts_at", getattr(self.instance, "starts_at", None))
        ends_at = attrs.get("ends_at", getattr(self.instance, "ends_at", None))
        if starts_at and ends_at and starts_at > ends_at:
            raise serializers.ValidationError({"ends_at": "ends_at must be after starts_at"})
        return attrs


class EventExpenseCreateSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    occurred_at = serializers.DateTimeField(required=False, allow_null=True)
