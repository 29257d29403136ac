"""
Billing views.

Bills are always returned as composites: the bill header with its line
items (ordered by serial number) and the patient it was issued to.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from desk.serializers.bill import BillCreateSerializer, BillListQuerySerializer, BillStatusSerializer
from desk.services.bills import (
    create_bill,
    delete_bill,
    get_bill,
    list_bills,
    list_bills_for_patient,
    update_bill_status,
)


@api_view(['GET', 'POST'])
def bills(request):
    """List bills newest first (optionally ``?patientId=``) or issue a bill.

    The bill number is assigned by the server; subtotal, tax, discount
    and total come from the caller and are checked against the items
    unless ``BILLING_VERIFY_TOTALS`` is off.
    """
    if request.method == 'GET':
        q = BillListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        patient_id = q.validated_data.get('patientId')
        if patient_id:
            return Response(list_bills_for_patient(patient_id))
        return Response(list_bills())

    data = BillCreateSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    bill = create_bill(data.validated_data)
    return Response(bill, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
def bill_detail(request, pk: int):
    if request.method == 'DELETE':
        if not delete_bill(pk):
            raise NotFound('Bill not found')
        return Response({'message': 'Bill deleted successfully'})

    bill = get_bill(pk)
    if bill is None:
        raise NotFound('Bill not found')
    return Response(bill)


@api_view(['PATCH'])
def bill_status(request, pk: int):
    if get_bill(pk) is None:
        raise NotFound('Bill not found')
    data = BillStatusSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    bill = update_bill_status(pk, data.validated_data['status'])
    if bill is None:
        raise NotFound('Bill not found')
    return Response({'message': 'Bill status updated successfully', 'bill': bill})
