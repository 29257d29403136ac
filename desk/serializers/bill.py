from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from desk.models import Bill
from desk.serializers.fields import BillDateField, MoneyField, clean_text
from desk.services.money import CENT, line_amount

ZERO = Decimal('0')


class BillItemInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)
    rate = MoneyField()
    discount = MoneyField(required=False, default=ZERO)
    amount = MoneyField()

    def validate_description(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Description is required')
        return v


class BillCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(source='patient_id', min_value=1)
    billDate = BillDateField(source='bill_date')
    subtotal = MoneyField()
    tax = MoneyField(required=False, default=ZERO)
    discount = MoneyField(required=False, default=ZERO)
    total = MoneyField()
    status = serializers.ChoiceField(choices=Bill.STATUS_CHOICES, required=False, default=Bill.STATUS_PENDING)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    items = BillItemInputSerializer(many=True, allow_empty=False)

    def validate_notes(self, v):
        return clean_text(v) or None

    def validate(self, attrs):
        if settings.BILLING_VERIFY_TOTALS:
            verify_totals(attrs)
        return attrs


def _off(a, b) -> bool:
    return abs(a - b) > CENT


def verify_totals(attrs: dict) -> None:
    """Check caller-computed money fields against the line items.

    amount = quantity * rate - discount per item, subtotal = sum of
    amounts, total = subtotal - discount; one cent of slack.  Tax is
    recorded as given and is not part of the total.
    """
    item_errors = []
    for item in attrs['items']:
        expected = line_amount(item['quantity'], item['rate'], item.get('discount') or ZERO)
        if _off(item['amount'], expected):
            item_errors.append({'amount': [f'Amount should be {expected}']})
        else:
            item_errors.append({})
    if any(item_errors):
        raise serializers.ValidationError({'items': item_errors})

    subtotal = sum((item['amount'] for item in attrs['items']), ZERO)
    if _off(attrs['subtotal'], subtotal):
        raise serializers.ValidationError({'subtotal': [f'Subtotal should be {subtotal}']})

    total = attrs['subtotal'] - attrs.get('discount', ZERO)
    if _off(attrs['total'], total):
        raise serializers.ValidationError({'total': [f'Total should be {total}']})


class BillStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Bill.STATUS_CHOICES)


class BillListQuerySerializer(serializers.Serializer):
    patientId = serializers.IntegerField(required=False, min_value=1)
