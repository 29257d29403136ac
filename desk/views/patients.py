"""
Patient registry views.

Registration, lookup, partial edits, removal and a name/phone search
over the patient list.  Validation happens here, before the registry
service is called.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from desk.serializers.patient import PatientListQuerySerializer, PatientSerializer
from desk.services.patients import (
    create_patient,
    delete_patient,
    format_patient,
    get_patient,
    list_patients,
    search_patients,
    update_patient,
)


@api_view(['GET', 'POST'])
def patients(request):
    """List patients newest first (optionally ``?search=``) or register one."""
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        search = q.validated_data.get('search')
        found = search_patients(search) if search else list_patients()
        return Response([format_patient(p) for p in found])

    data = PatientSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    patient = create_patient(data.validated_data)
    return Response(format_patient(patient), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
def patient_detail(request, pk: int):
    if request.method == 'DELETE':
        if not delete_patient(pk):
            raise NotFound('Patient not found')
        return Response({'message': 'Patient deleted successfully'})

    patient = get_patient(pk)
    if patient is None:
        raise NotFound('Patient not found')
    if request.method == 'GET':
        return Response(format_patient(patient))

    # PUT carries only the fields being changed
    data = PatientSerializer(patient, data=request.data, partial=True)
    data.is_valid(raise_exception=True)
    patient = update_patient(pk, data.validated_data)
    if patient is None:
        raise NotFound('Patient not found')
    return Response(format_patient(patient))
