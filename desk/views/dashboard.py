"""
Dashboard statistics endpoint.

Figures are recomputed on every call: patient count, today's bills and
revenue, pending bills and the five most recent patients and bills.
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from desk.services.dashboard import get_dashboard_stats


@api_view(['GET'])
def dashboard_stats(request):
    return Response(get_dashboard_stats())
