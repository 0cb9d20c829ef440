from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from modules.components import schemas, service

router = APIRouter(prefix="/components", tags=["components"])


@router.post("/", response_model=schemas.ComponentRead, status_code=status.HTTP_201_CREATED)
def create_component_endpoint(component_in: schemas.ComponentCreate, db: Session = Depends(get_db)):
    return service.create_component(db, component_in)


@router.get("/", response_model=list[schemas.ComponentRead])
def list_components_endpoint(db: Session = Depends(get_db)):
    return service.list_components(db)


@router.get("/{component_id}/", response_model=schemas.ComponentRead)
def get_component_endpoint(component_id: str, db: Session = Depends(get_db)):
    return service.get_component(db, component_id)


@router.put("/{component_id}/", response_model=schemas.ComponentRead)
def update_component_endpoint(
    component_id: str, component_in: schemas.ComponentUpdate, db: Session = Depends(get_db)
):
    return service.update_component(db, component_id, component_in)


@router.delete("/{component_id}/", status_code=status.HTTP_204_NO_CONTENT)
def delete_component_endpoint(component_id: str, db: Session = Depends(get_db)):
    service.delete_component(db, component_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
