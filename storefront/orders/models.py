# module storefront.orders.models
"""Modèles des commandes matérialisées par le webhook Stripe.
Une commande est immuable après insertion et unique par source_session_id.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

class OrderLine(BaseModel):
    title: str
    unit_price: Decimal
    quantity: int = Field(gt=0)
    image_url: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

class Order(BaseModel):
    order_id: str
    customer_email: Optional[str] = None
    line_items: List[OrderLine]
    total_amount: Decimal
    payment_status: str = "unpaid"
    created_at: datetime
    source_session_id: str

    def to_row(self) -> Dict[str, Any]:
        """Ligne prête pour la table orders (Decimal/datetime sérialisés en JSON)."""
        row = self.model_dump(mode="json")
        row["id"] = row.pop("order_id")
        return row

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Order":
        data = dict(row)
        if "id" in data and "order_id" not in data:
            data["order_id"] = data.pop("id")
        return cls.model_validate(data)
