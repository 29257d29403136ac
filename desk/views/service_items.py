from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from desk.serializers.service_item import ServiceItemSerializer
from desk.services.catalog import (
    create_service_item,
    delete_service_item,
    format_service_item,
    get_service_item,
    list_service_items,
    update_service_item,
)


@api_view(['GET', 'POST'])
def service_items(request):
    if request.method == 'GET':
        return Response([format_service_item(s) for s in list_service_items()])
    data = ServiceItemSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    item = create_service_item(data.validated_data)
    return Response(format_service_item(item), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
def service_item_detail(request, pk: int):
    if request.method == 'DELETE':
        if not delete_service_item(pk):
            raise NotFound('Service item not found')
        return Response({'message': 'Service item deleted successfully'})

    item = get_service_item(pk)
    if item is None:
        raise NotFound('Service item not found')
    if request.method == 'GET':
        return Response(format_service_item(item))

    data = ServiceItemSerializer(item, data=request.data, partial=True)
    data.is_valid(raise_exception=True)
    item = update_service_item(pk, data.validated_data)
    if item is None:
        raise NotFound('Service item not found')
    return Response(format_service_item(item))
