import pytest

from desk.exceptions import PatientHasBills
from desk.models import Bill, Patient
from desk.services import bills as bill_service
from desk.services import patients as patient_service

pytestmark = pytest.mark.django_db


def test_search_scenario(make_patient):
    asha = make_patient()
    make_patient('Rahul', 'Singh', '9123456789')

    assert [p.id for p in patient_service.search_patients('verma')] == [asha.id]
    assert [p.id for p in patient_service.search_patients('987')] == [asha.id]
    assert len(patient_service.search_patients('  ')) == 2


def test_update_applies_only_given_fields(make_patient):
    p = make_patient(email='asha@example.com')
    updated = patient_service.update_patient(p.id, {'address': '12 MG Road'})
    assert updated.address == '12 MG Road'
    p.refresh_from_db()
    assert p.email == 'asha@example.com'
    assert p.address == '12 MG Road'
    assert patient_service.update_patient(9999, {'age': 5}) is None


def test_format_uses_client_field_names(make_patient):
    data = patient_service.format_patient(make_patient(blood_group='B+'))
    assert data['firstName'] == 'Asha'
    assert data['bloodGroup'] == 'B+'
    assert data['admissionDateTime'] is None
    assert set(patient_service.FIELD_MAP) <= set(data)


def test_delete_allowed_by_default_leaves_bills(make_patient, bill_data):
    p = make_patient()
    bill = bill_service.create_bill(bill_data(p.id))

    assert patient_service.delete_patient(p.id) is True

    assert Bill.objects.filter(pk=bill['id']).exists()
    assert bill_service.list_bills() == []


def test_delete_blocked_when_bills_exist(make_patient, bill_data, settings):
    settings.PATIENT_DELETE_POLICY = 'block'
    p = make_patient()
    bill_service.create_bill(bill_data(p.id))

    with pytest.raises(PatientHasBills):
        patient_service.delete_patient(p.id)
    assert Patient.objects.filter(pk=p.id).exists()


def test_delete_missing_patient(settings):
    settings.PATIENT_DELETE_POLICY = 'block'
    assert patient_service.delete_patient(9999) is False


def test_populate_data_command():
    from io import StringIO

    from django.core.management import call_command

    out = StringIO()
    call_command('populate_data', patients=3, bills=4, seed=7, stdout=out)

    assert Patient.objects.count() == 3
    assert Bill.objects.count() == 4
    assert sorted(Bill.objects.values_list('bill_number', flat=True)) == [f'B{n:06d}' for n in range(1, 5)]
    assert 'Created 3 patients' in out.getvalue()

    call_command('populate_data', patients=0, bills=0, reset=True, stdout=StringIO())
    assert not Bill.objects.exists()


def test_phone_search_ignores_formatting(make_patient):
    spaced = make_patient(phone='98765 43210')
    dashed = make_patient('Rahul', 'Singh', '+91 (912) 345-6789')

    assert [p.id for p in patient_service.search_patients('9876543210')] == [spaced.id]
    assert [p.id for p in patient_service.search_patients('912-345')] == [dashed.id]
    assert [p.id for p in patient_service.search_patients('65 43')] == [spaced.id]
