from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from desk.serializers.report import ReportQuerySerializer
from desk.services.reports import REPORT_TYPES, build_report


@api_view(['GET'])
def report(request, report_type: str):
    """Placeholder JSON reports (``daily-revenue``, ``patient-list``)."""
    q = ReportQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    data = build_report(report_type, days=q.validated_data.get('days'))
    if data is None:
        raise NotFound(f"Unknown report '{report_type}', expected one of: {', '.join(REPORT_TYPES)}")
    return Response(data)
