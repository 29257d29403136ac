from rest_framework import serializers

from desk.models import ServiceItem
from desk.serializers.fields import MoneyField, clean_text


class ServiceItemSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price = MoneyField()
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=ServiceItem.STATUS_CHOICES, required=False)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Service name is required')
        return v

    def validate_description(self, v):
        return clean_text(v) or None

    def validate_category(self, v):
        return clean_text(v) or None
