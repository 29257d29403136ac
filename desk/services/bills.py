"""
Billing aggregate: bills together with their line items and patient.

A bill is always read as a composite (``BillWithItems``): the header,
its items ordered by serial number and the referenced patient.  The
composite is rebuilt on every read and never stored.  Writes that touch
the header and its items run inside one transaction.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Prefetch
from rest_framework.exceptions import ValidationError

from desk.exceptions import PreconditionFailed, StatusTransitionError
from desk.models import Bill, BillItem, Patient
from desk.services.money import fmt_money, money2
from desk.services.numbering import next_bill_number
from desk.services.patients import format_patient

logger = logging.getLogger(__name__)

STATUSES = {value for value, _ in Bill.STATUS_CHOICES}

# Used only when BILLING_STRICT_STATUS is on; paid and overdue are final.
ALLOWED_TRANSITIONS = {
    Bill.STATUS_PENDING: {Bill.STATUS_PAID, Bill.STATUS_OVERDUE},
    Bill.STATUS_PAID: set(),
    Bill.STATUS_OVERDUE: set(),
}


def format_bill_item(item: BillItem) -> dict:
    return {
        'id': item.id,
        'billId': item.bill_id,
        'serialNumber': item.serial_number,
        'description': item.description,
        'quantity': item.quantity,
        'rate': fmt_money(item.rate),
        'discount': fmt_money(item.discount),
        'amount': fmt_money(item.amount),
    }


def format_bill(bill: Bill, items: Iterable[BillItem], patient: Patient) -> dict:
    return {
        'id': bill.id,
        'billNumber': bill.bill_number,
        'patientId': bill.patient_id,
        'billDate': bill.bill_date.isoformat() if bill.bill_date else None,
        'subtotal': fmt_money(bill.subtotal),
        'tax': fmt_money(bill.tax),
        'discount': fmt_money(bill.discount),
        'total': fmt_money(bill.total),
        'status': bill.status,
        'notes': bill.notes,
        'createdAt': bill.created_at.isoformat() if bill.created_at else None,
        'items': [format_bill_item(i) for i in items],
        'patient': format_patient(patient),
    }


def _ordered_items() -> Prefetch:
    return Prefetch('items', queryset=BillItem.objects.order_by('serial_number'))


def _compose_many(bills: Iterable[Bill]) -> list[dict]:
    bills = list(bills)
    patients = Patient.objects.in_bulk({b.patient_id for b in bills})
    result = []
    for bill in bills:
        patient = patients.get(bill.patient_id)
        if patient is None:
            logger.warning('bill %s (%s) references missing patient %s, skipped',
                           bill.id, bill.bill_number, bill.patient_id)
            continue
        result.append(format_bill(bill, bill.items.all(), patient))
    return result


def _newest_first(qs):
    return qs.prefetch_related(_ordered_items()).order_by('-created_at', '-id')


def get_bill(bill_id: int) -> Optional[dict]:
    bill = Bill.objects.prefetch_related(_ordered_items()).filter(pk=bill_id).first()
    if bill is None:
        return None
    found = _compose_many([bill])
    return found[0] if found else None


def list_bills(*, limit: Optional[int] = None) -> list[dict]:
    qs = _newest_first(Bill.objects.all())
    return _compose_many(qs[:limit] if limit else qs)


def list_bills_for_patient(patient_id: int) -> list[dict]:
    return _compose_many(_newest_first(Bill.objects.filter(patient_id=patient_id)))


def _insert(number: str, data: dict, patient: Patient, items: list[dict]) -> Bill:
    with transaction.atomic():
        bill = Bill.objects.create(
            bill_number=number,
            patient=patient,
            bill_date=data['bill_date'],
            subtotal=money2(data['subtotal']),
            tax=money2(data.get('tax') or 0),
            discount=money2(data.get('discount') or 0),
            total=money2(data['total']),
            status=data.get('status') or Bill.STATUS_PENDING,
            notes=data.get('notes') or None,
        )
        BillItem.objects.bulk_create([
            BillItem(
                bill=bill,
                serial_number=index,
                description=item['description'],
                quantity=item['quantity'],
                rate=money2(item['rate']),
                discount=money2(item.get('discount') or 0),
                amount=money2(item['amount']),
            )
            for index, item in enumerate(items, start=1)
        ])
    return bill


def create_bill(data: dict) -> dict:
    """Issue a bill with its line items and return the composite.

    ``data`` uses model attribute names (``patient_id``, ``bill_date``,
    ...) plus an ``items`` list.  The patient must exist; nothing is
    written otherwise.
    """
    items = list(data.get('items') or [])
    if not items:
        raise ValidationError({'items': ['A bill needs at least one item.']})

    patient_id = data.get('patient_id')
    patient = Patient.objects.filter(pk=patient_id).first()
    if patient is None:
        raise PreconditionFailed(f'Patient with ID {patient_id} not found', field='patientId')

    attempts = max(1, settings.BILLING_NUMBER_RETRIES)
    for attempt in range(1, attempts + 1):
        number = next_bill_number()
        try:
            bill = _insert(number, data, patient, items)
        except IntegrityError:
            # Another request issued the same number between our read and insert.
            if attempt < attempts and Bill.objects.filter(bill_number=number).exists():
                logger.warning('bill number %s already taken, retrying (%d/%d)', number, attempt, attempts)
                continue
            raise
        break

    logger.info('bill %s created (id=%s, patient=%s, items=%d)', bill.bill_number, bill.id, patient.id, len(items))
    persisted = Bill.objects.prefetch_related(_ordered_items()).get(pk=bill.pk)
    return format_bill(persisted, persisted.items.all(), patient)


def check_transition(current: str, target: str) -> None:
    if current == target:
        return
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise StatusTransitionError(f'Cannot change bill status from {current} to {target}')


def update_bill_status(bill_id: int, status: str) -> Optional[dict]:
    if status not in STATUSES:
        raise ValidationError({'status': [f'"{status}" is not a valid choice.']})
    with transaction.atomic():
        bill = Bill.objects.select_for_update().filter(pk=bill_id).first()
        if bill is None:
            return None
        if settings.BILLING_STRICT_STATUS:
            check_transition(bill.status, status)
        if bill.status != status:
            bill.status = status
            bill.save(update_fields=['status'])
    return get_bill(bill_id)


def delete_bill(bill_id: int) -> bool:
    """Remove the items, then the header.  ``False`` if no such bill."""
    with transaction.atomic():
        BillItem.objects.filter(bill_id=bill_id).delete()
        deleted, _ = Bill.objects.filter(pk=bill_id).delete()
    if deleted:
        logger.info('bill %s deleted', bill_id)
    return deleted > 0
