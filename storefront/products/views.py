# module storefront.products.views

"""Endpoints du catalogue produits (CRUD mince sur la table products).
- Lecture publique: liste et détail.
- Écritures (création, mise à jour, suppression): jeton bearer requis.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from storefront.infra.supabase_client import get_storage
from storefront.utils.security import require_user
from . import repository

router = APIRouter(prefix="/api/v1/products", tags=["Products API"])

class ProductIn(BaseModel):
    title: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None

class ProductPatch(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None

@router.get("")
def list_products(storage=Depends(get_storage)) -> List[Dict[str, Any]]:
    return repository.list_products(storage)

@router.get("/{product_id}")
def get_product(product_id: str, storage=Depends(get_storage)):
    product = repository.get_product(storage, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    return product

@router.post("", status_code=201)
def create_product(body: ProductIn, user: dict = Depends(require_user), storage=Depends(get_storage)):
    row = repository.create_product(storage, body.model_dump(mode="json", exclude_none=True))
    if row is None:
        raise HTTPException(status_code=503, detail="Création du produit impossible")
    return row

@router.patch("/{product_id}")
def update_product(product_id: str, body: ProductPatch, user: dict = Depends(require_user), storage=Depends(get_storage)):
    """Mise à jour partielle: seuls les champs fournis sont écrits."""
    changes = body.model_dump(mode="json", exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="Aucun champ à mettre à jour")
    row = repository.update_product(storage, product_id, changes)
    if row is None:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    return row

@router.delete("/{product_id}")
def delete_product(product_id: str, user: dict = Depends(require_user), storage=Depends(get_storage)):
    if not repository.delete_product(storage, product_id):
        raise HTTPException(status_code=404, detail="Produit introuvable")
    return {"deleted": True}
