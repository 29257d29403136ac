"""
Report placeholders offered on the reports page.

Only two small JSON reports exist; there is no file export.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Optional

from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from desk.models import Bill, Patient
from desk.services.money import fmt_money

REPORT_TYPES = ('daily-revenue', 'patient-list')


def daily_revenue(days: int = 30, now=None) -> list[dict]:
    """Bill count and revenue per local day, oldest first, zero days included."""
    end_day = timezone.localdate(now)
    start_day = end_day - timedelta(days=days - 1)
    rows = (
        Bill.objects.filter(patient_id__in=Patient.objects.values('pk'))
        .annotate(day=TruncDate('bill_date'))
        .filter(day__gte=start_day, day__lte=end_day)
        .values('day')
        .annotate(bills=Count('id'), revenue=Sum('total'))
    )
    by_day = {r['day']: r for r in rows}
    report = []
    for offset in range(days):
        day = start_day + timedelta(days=offset)
        row = by_day.get(day)
        report.append({
            'date': day.isoformat(),
            'bills': row['bills'] if row else 0,
            'revenue': fmt_money(row['revenue'] if row else 0),
        })
    return report


def patient_list() -> list[dict]:
    return [
        {'id': p.id, 'name': p.full_name, 'phone': p.phone, 'status': p.status}
        for p in Patient.objects.order_by('last_name', 'first_name', 'id')
    ]


def build_report(report_type: str, *, days: Optional[int] = None) -> Optional[dict]:
    if report_type == 'daily-revenue':
        days = days or 30
        return {'report': report_type, 'days': days, 'rows': daily_revenue(days)}
    if report_type == 'patient-list':
        return {'report': report_type, 'rows': patient_list()}
    return None
