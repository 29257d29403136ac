"""
Dashboard statistics, computed on every request.

"Today" is the local calendar day of ``settings.TIME_ZONE``, from
midnight to the next midnight.  Bills whose patient no longer exists
are left out of every figure, matching the bill listings.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from django.db.models import Count, Sum
from django.utils import timezone

from desk.models import Bill, Patient
from desk.services.bills import list_bills
from desk.services.money import money2
from desk.services.patients import format_patient, list_patients

RECENT_LIMIT = 5


def today_window(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    local_now = timezone.localtime(now)
    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def _billable():
    return Bill.objects.filter(patient_id__in=Patient.objects.values('pk'))


def get_dashboard_stats(now: Optional[datetime] = None) -> dict:
    start, end = today_window(now)
    today = _billable().filter(bill_date__gte=start, bill_date__lt=end).aggregate(
        count=Count('id'), revenue=Sum('total'),
    )
    return {
        'totalPatients': Patient.objects.count(),
        'todayBills': today['count'] or 0,
        'todayRevenue': float(money2(today['revenue'] or 0)),
        'pendingBills': _billable().filter(status=Bill.STATUS_PENDING).count(),
        'recentPatients': [format_patient(p) for p in list_patients(limit=RECENT_LIMIT)],
        'recentBills': list_bills(limit=RECENT_LIMIT),
    }
