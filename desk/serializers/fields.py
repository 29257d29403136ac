from datetime import datetime, time
from decimal import Decimal

import bleach
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import serializers

from desk.services.money import money2

MAX_MONEY = Decimal('9999999999.99')


def clean_text(v):
    return bleach.clean((v or '').strip(), strip=True)


class MoneyField(serializers.DecimalField):
    """Non-negative amount, rounded half-up to two places."""

    def __init__(self, **kwargs):
        kwargs.setdefault('min_value', Decimal('0'))
        kwargs.setdefault('max_value', MAX_MONEY)
        super().__init__(max_digits=None, decimal_places=None, **kwargs)

    def to_internal_value(self, data):
        return money2(super().to_internal_value(data))


class OptionalDateTimeField(serializers.DateTimeField):
    """DateTimeField that reads an empty string as "not set"."""

    def validate_empty_values(self, data):
        if isinstance(data, str) and not data.strip():
            data = None
        return super().validate_empty_values(data)


class BillDateField(serializers.DateTimeField):
    """ISO timestamp; a bare ``YYYY-MM-DD`` means local midnight of that day."""

    def to_internal_value(self, value):
        try:
            return super().to_internal_value(value)
        except serializers.ValidationError:
            try:
                day = parse_date(value) if isinstance(value, str) else None
            except ValueError:
                day = None
            if day is None:
                raise
            return timezone.make_aware(datetime.combine(day, time.min))
