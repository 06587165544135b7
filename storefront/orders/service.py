from typing import List

from storefront.orders import repository
from storefront.orders.models import Order

def list_orders_for_customer(storage, email: str) -> List[Order]:
    """Lecture seule; l'absence de commandes n'est pas une erreur."""
    return [Order.from_row(row) for row in repository.list_orders_for_customer(storage, email)]
