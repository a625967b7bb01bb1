"""Read helpers for order lists (newest first)."""

from protean.utils.globals import current_domain

from storefront.order.order import Order


def orders_for_customer(customer_id):
    repo = current_domain.repository_for(Order)
    return repo._dao.query.filter(customer_id=str(customer_id)).order_by("-order_date").all().items


def all_orders():
    """Every order across all shoppers, for the admin dashboard."""
    repo = current_domain.repository_for(Order)
    return repo._dao.query.order_by("-order_date").all().items
