"""
URL mappings for the front-office API.

Paths match the ones the browser client calls.  Note that trailing
slashes are deliberately omitted.
"""
from django.urls import path, include

from .views import bills
from .views import dashboard
from .views import health
from .views import patients
from .views import reports
from .views import service_items


urlpatterns = [
    # Prometheus exposition at /metrics
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Patients
    path('api/patients', patients.patients, name='patients'),
    path('api/patients/<int:pk>', patients.patient_detail, name='patient-detail'),
    # Bills
    path('api/bills', bills.bills, name='bills'),
    path('api/bills/<int:pk>', bills.bill_detail, name='bill-detail'),
    path('api/bills/<int:pk>/status', bills.bill_status, name='bill-status'),
    # Service price list
    path('api/service-items', service_items.service_items, name='service-items'),
    path('api/service-items/<int:pk>', service_items.service_item_detail, name='service-item-detail'),
    # Dashboard & reports
    path('api/dashboard/stats', dashboard.dashboard_stats, name='dashboard-stats'),
    path('api/reports/<slug:report_type>', reports.report, name='report'),
]
