from sqlalchemy import Column, Float, String

from core.models import Base, TimestampMixin


class Component(Base, TimestampMixin):
    __tablename__ = "components"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, default=0.0)
    unit = Column(String(32), nullable=False, default="pcs")
    category = Column(String(128), nullable=False, default="General")
