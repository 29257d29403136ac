import logging
from typing import Optional

from desk.models import ServiceItem
from desk.services.money import fmt_money, money2

logger = logging.getLogger(__name__)


def format_service_item(s: ServiceItem) -> dict:
    return {
        'id': s.id,
        'name': s.name,
        'description': s.description,
        'price': fmt_money(s.price),
        'category': s.category,
        'status': s.status,
        'createdAt': s.created_at.isoformat() if s.created_at else None,
    }


def list_service_items() -> list[ServiceItem]:
    return list(ServiceItem.objects.order_by('-created_at', '-id'))


def get_service_item(item_id: int) -> Optional[ServiceItem]:
    return ServiceItem.objects.filter(pk=item_id).first()


def create_service_item(data: dict) -> ServiceItem:
    data = dict(data)
    data['price'] = money2(data['price'])
    return ServiceItem.objects.create(**data)


def update_service_item(item_id: int, changes: dict) -> Optional[ServiceItem]:
    item = get_service_item(item_id)
    if item is None:
        return None
    if 'price' in changes:
        changes = {**changes, 'price': money2(changes['price'])}
    for attr, value in changes.items():
        setattr(item, attr, value)
    if changes:
        item.save(update_fields=list(changes))
    return item


def delete_service_item(item_id: int) -> bool:
    deleted, _ = ServiceItem.objects.filter(pk=item_id).delete()
    if deleted:
        logger.info('service item %s deleted', item_id)
    return deleted > 0
