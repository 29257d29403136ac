from datetime import timedelta

import pytest
from django.urls import reverse

from desk.models import Patient
from desk.services import bills as bill_service
from desk.services.dashboard import get_dashboard_stats, today_window
from desk.services.reports import build_report, daily_revenue

pytestmark = pytest.mark.django_db


def test_today_figures(make_patient, bill_data):
    patient = make_patient()
    start, _ = today_window()
    yesterday = start - timedelta(hours=1)
    for amount in ('100.00', '250.50', '49.50'):
        bill_service.create_bill(bill_data(patient.id, amount, bill_date=start + timedelta(minutes=1)))
    for amount in ('999.00', '1.00'):
        bill_service.create_bill(bill_data(patient.id, amount, bill_date=yesterday, status='paid'))

    stats = get_dashboard_stats()

    assert stats['todayBills'] == 3
    assert stats['todayRevenue'] == 400.0
    assert stats['pendingBills'] == 3
    assert stats['totalPatients'] == 1


def test_recent_lists_are_newest_first_and_capped(make_patient, bill_data):
    patients = [make_patient(f'P{i}', 'Test', f'90000000{i:02d}') for i in range(7)]
    made = [bill_service.create_bill(bill_data(p.id)) for p in patients]

    stats = get_dashboard_stats()

    assert [p['id'] for p in stats['recentPatients']] == [p.id for p in reversed(patients)][:5]
    assert [b['id'] for b in stats['recentBills']] == [b['id'] for b in reversed(made)][:5]
    assert stats['recentBills'][0]['patient']['firstName'] == 'P6'


def test_bills_of_deleted_patients_do_not_count(make_patient, bill_data):
    keep, gone = make_patient(), make_patient('Rahul', 'Singh', '9123456789')
    bill_service.create_bill(bill_data(keep.id, '10.00'))
    bill_service.create_bill(bill_data(gone.id, '20.00'))
    Patient.objects.filter(pk=gone.id).delete()

    stats = get_dashboard_stats()

    assert stats['todayBills'] == 1
    assert stats['todayRevenue'] == 10.0
    assert stats['pendingBills'] == 1
    assert len(stats['recentBills']) == 1


def test_empty_dashboard():
    stats = get_dashboard_stats()
    assert stats == {
        'totalPatients': 0,
        'todayBills': 0,
        'todayRevenue': 0.0,
        'pendingBills': 0,
        'recentPatients': [],
        'recentBills': [],
    }


def test_dashboard_endpoint(api_client, make_patient, bill_payload):
    patient = make_patient()
    assert api_client.post(reverse('bills'), bill_payload(patient.id), format='json').status_code == 201

    resp = api_client.get(reverse('dashboard-stats'))

    assert resp.status_code == 200
    assert resp.data['totalPatients'] == 1
    assert resp.data['todayBills'] == 1
    assert resp.data['todayRevenue'] == 600.0
    assert resp.data['recentBills'][0]['billNumber'] == 'B000001'


def test_daily_revenue_groups_by_local_day(make_patient, bill_data):
    patient = make_patient()
    start, _ = today_window()
    bill_service.create_bill(bill_data(patient.id, '100.00', bill_date=start + timedelta(hours=1)))
    bill_service.create_bill(bill_data(patient.id, '50.25', bill_date=start + timedelta(hours=2)))
    bill_service.create_bill(bill_data(patient.id, '70.00', bill_date=start - timedelta(hours=1)))

    rows = daily_revenue(days=3)

    assert [r['bills'] for r in rows] == [0, 1, 2]
    assert [r['revenue'] for r in rows] == ['0.00', '70.00', '150.25']
    assert rows[-1]['date'] == start.date().isoformat()


def test_unknown_report_type():
    assert build_report('monthly-tax') is None
    assert build_report('daily-revenue')['days'] == 30
