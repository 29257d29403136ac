import logging
import re
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F, Q, Value
from django.db.models.functions import Replace

from desk.exceptions import PatientHasBills
from desk.models import Bill, Patient

logger = logging.getLogger(__name__)

# JSON field name -> model attribute
FIELD_MAP = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'fatherHusbandName': 'father_husband_name',
    'age': 'age',
    'gender': 'gender',
    'phone': 'phone',
    'email': 'email',
    'address': 'address',
    'emergencyContact': 'emergency_contact',
    'bloodGroup': 'blood_group',
    'medicalHistory': 'medical_history',
    'admissionDateTime': 'admission_date_time',
    'dischargeDateTime': 'discharge_date_time',
    'status': 'status',
}


def _iso(dt) -> Optional[str]:
    return dt.isoformat() if dt else None


def format_patient(p: Patient) -> dict:
    data = {key: getattr(p, attr) for key, attr in FIELD_MAP.items()}
    data['admissionDateTime'] = _iso(p.admission_date_time)
    data['dischargeDateTime'] = _iso(p.discharge_date_time)
    return {'id': p.id, **data, 'createdAt': _iso(p.created_at)}


def get_patient(patient_id: int) -> Optional[Patient]:
    return Patient.objects.filter(pk=patient_id).first()


def list_patients(*, limit: Optional[int] = None) -> list[Patient]:
    qs = Patient.objects.order_by('-created_at', '-id')
    return list(qs[:limit] if limit else qs)


PHONE_PUNCTUATION = (' ', '+', '-', '(', ')')


def _phone_digits():
    expr = F('phone')
    for ch in PHONE_PUNCTUATION:
        expr = Replace(expr, Value(ch), Value(''))
    return expr


def search_patients(query: str) -> list[Patient]:
    """First/last name (case-insensitive) or a run of the phone's digits."""
    query = (query or '').strip()
    if not query:
        return list_patients()
    match = Q(first_name__icontains=query) | Q(last_name__icontains=query)
    qs = Patient.objects.all()
    digits = re.sub(r'\D', '', query)
    if digits:
        qs = qs.annotate(phone_digits=_phone_digits())
        match |= Q(phone_digits__contains=digits)
    return list(qs.filter(match).order_by('-created_at', '-id'))


def create_patient(data: dict) -> Patient:
    patient = Patient.objects.create(**data)
    logger.info('patient %s registered', patient.id)
    return patient


def update_patient(patient_id: int, changes: dict) -> Optional[Patient]:
    """Apply only the supplied fields; everything else keeps its value."""
    with transaction.atomic():
        patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
        if patient is None:
            return None
        if changes:
            for attr, value in changes.items():
                setattr(patient, attr, value)
            patient.save(update_fields=list(changes))
    return patient


def delete_patient(patient_id: int) -> bool:
    if settings.PATIENT_DELETE_POLICY == 'block' and Bill.objects.filter(patient_id=patient_id).exists():
        raise PatientHasBills()
    deleted, _ = Patient.objects.filter(pk=patient_id).delete()
    if deleted:
        logger.info('patient %s deleted', patient_id)
    return deleted > 0
