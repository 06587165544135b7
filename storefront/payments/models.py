from decimal import Decimal
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

class CartItem(BaseModel):
    """Ligne de panier transitoire (jamais persistée telle quelle)."""
    model_config = ConfigDict(populate_by_name=True)

    product_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("product_id", "productId", "_id"))
    title: str = Field(min_length=1)
    unit_price: Decimal = Field(ge=0, validation_alias=AliasChoices("unit_price", "unitPrice", "price"))
    quantity: int = Field(gt=0)
    image_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("image_url", "imageUrl", "image"))

class CheckoutRequest(BaseModel):
    cart: List[CartItem] = Field(min_length=1)
    email: Optional[EmailStr] = None
