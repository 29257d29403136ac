from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from desk.models import Patient


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_patient(db):
    def _make(first_name='Asha', last_name='Verma', phone='9876543210', **extra):
        fields = {'age': 34, 'gender': 'female', **extra}
        return Patient.objects.create(first_name=first_name, last_name=last_name, phone=phone, **fields)
    return _make


@pytest.fixture
def bill_data():
    """Service-level bill input (model attribute names) with consistent totals."""
    def _data(patient_id, *amounts, bill_date=None, status='pending'):
        amounts = amounts or ('100.00',)
        items = [
            {
                'description': f'Service {i}',
                'quantity': 1,
                'rate': Decimal(a),
                'discount': Decimal('0'),
                'amount': Decimal(a),
            }
            for i, a in enumerate(amounts, start=1)
        ]
        subtotal = sum((i['amount'] for i in items), Decimal('0'))
        return {
            'patient_id': patient_id,
            'bill_date': bill_date or timezone.now(),
            'subtotal': subtotal,
            'tax': Decimal('0'),
            'discount': Decimal('0'),
            'total': subtotal,
            'status': status,
            'items': items,
        }
    return _data


@pytest.fixture
def bill_payload():
    """JSON body for POST /api/bills."""
    def _payload(patient_id, **overrides):
        body = {
            'patientId': patient_id,
            'billDate': timezone.now().isoformat(),
            'subtotal': 650,
            'tax': 0,
            'discount': 50,
            'total': 600,
            'notes': 'OPD visit',
            'items': [
                {'description': 'Consultation', 'quantity': 1, 'rate': 500, 'amount': 500},
                {'description': 'Dressing', 'quantity': 2, 'rate': 100, 'discount': 50, 'amount': 150},
            ],
        }
        body.update(overrides)
        return body
    return _payload
