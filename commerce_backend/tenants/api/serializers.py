# tenants/api/serializers.py

from rest_framework import serializers

from tenants.models import Organization


class OrganizationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Organization
        fields = ["id", "name", "slug", "currency", "tax_rate", "created_at"]
        read_only_fields = ("id", "slug", "created_at")

    def validate_tax_rate(self, value):
        if value < 0 or value >= 1:
            raise serializers.ValidationError("tax_rate must be in [0, 1)")
        return value

    def validate_currency(self, value):
        value = (value or "").strip().upper()
        if len(value) != 3:
            raise serializers.ValidationError("currency must be a 3-letter code")
        return value
