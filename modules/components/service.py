import logging
import uuid
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from core.errors import ConflictException, NotFoundException
from modules.components import models, schemas

logger = logging.getLogger(__name__)


def _serialize_component(component: models.Component) -> Dict[str, Any]:
    return {
        "id": component.id,
        "name": component.name,
        "price": component.price,
        "unit": component.unit,
        "category": component.category,
    }


def _get_component_model(db: Session, component_id: str) -> models.Component:
    component = db.query(models.Component).filter(models.Component.id == component_id).first()
    if not component:
        raise NotFoundException("Component not found")
    return component


def create_component(db: Session, component_in: schemas.ComponentCreate) -> Dict[str, Any]:
    component_id = component_in.id or str(uuid.uuid4())
    if db.query(models.Component).filter(models.Component.id == component_id).first():
        raise ConflictException("A component with this id already exists")

    component = models.Component(
        id=component_id,
        name=component_in.name,
        price=component_in.price,
        unit=component_in.unit,
        category=component_in.category,
    )
    db.add(component)
    db.commit()
    db.refresh(component)
    logger.info("Created component %s (%s)", component.id, component.name)
    return _serialize_component(component)


def list_components(db: Session) -> List[Dict[str, Any]]:
    components = db.query(models.Component).all()
    return [_serialize_component(c) for c in components]


def get_component(db: Session, component_id: str) -> Dict[str, Any]:
    return _serialize_component(_get_component_model(db, component_id))


def update_component(db: Session, component_id: str, component_in: schemas.ComponentUpdate) -> Dict[str, Any]:
    component = _get_component_model(db, component_id)
    component.name = component_in.name
    component.price = component_in.price
    component.unit = component_in.unit
    component.category = component_in.category
    db.commit()
    db.refresh(component)
    return _serialize_component(component)


def delete_component(db: Session, component_id: str) -> None:
    # Recipe lines keep pointing at the removed id
    component = _get_component_model(db, component_id)
    db.delete(component)
    db.commit()
    logger.info("Deleted component %s", component_id)
