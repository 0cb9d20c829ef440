import logging
import uuid
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from core.errors import ConflictException, NotFoundException
from modules.products import models, schemas

logger = logging.getLogger(__name__)


def _serialize_product(product: models.Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "making_charges": product.making_charges,
        "components": [
            {
                "component_id": line.component_id,
                "quantity": line.quantity,
            }
            for line in product.recipe_lines
        ],
    }


def _build_lines(lines: List[schemas.ProductComponentWire]) -> List[models.ProductComponentLine]:
    return [
        models.ProductComponentLine(component_id=line.component_id, quantity=line.quantity, position=position)
        for position, line in enumerate(lines)
    ]


def _get_product_model(db: Session, product_id: str) -> models.Product:
    product = db.query(models.Product).filter(models.Product.id == product_id).first()
    if not product:
        raise NotFoundException("Product not found")
    return product


def create_product(db: Session, product_in: schemas.ProductCreate) -> Dict[str, Any]:
    product_id = product_in.id or str(uuid.uuid4())
    if db.query(models.Product).filter(models.Product.id == product_id).first():
        raise ConflictException("A product with this id already exists")

    product = models.Product(
        id=product_id,
        name=product_in.name,
        sku=product_in.sku,
        making_charges=product_in.making_charges,
    )
    product.recipe_lines = _build_lines(product_in.components)

    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Created product %s (%s) with %d recipe lines", product.id, product.name, len(product.recipe_lines))
    return _serialize_product(product)


def list_products(db: Session) -> List[Dict[str, Any]]:
    products = db.query(models.Product).all()
    return [_serialize_product(p) for p in products]


def get_product(db: Session, product_id: str) -> Dict[str, Any]:
    return _serialize_product(_get_product_model(db, product_id))


def update_product(db: Session, product_id: str, product_in: schemas.ProductUpdate) -> Dict[str, Any]:
    product = _get_product_model(db, product_id)
    product.name = product_in.name
    product.sku = product_in.sku
    product.making_charges = product_in.making_charges
    product.recipe_lines = _build_lines(product_in.components)
    db.commit()
    db.refresh(product)
    return _serialize_product(product)


def delete_product(db: Session, product_id: str) -> None:
    product = _get_product_model(db, product_id)
    db.delete(product)
    db.commit()
    logger.info("Deleted product %s", product_id)
