from sqlalchemy import Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from core.models import Base, TimestampMixin


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    sku = Column(String(64), nullable=False, default="")
    making_charges = Column(Float, nullable=False, default=0.0)

    recipe_lines = relationship(
        "ProductComponentLine",
        cascade="all, delete-orphan",
        back_populates="product",
        order_by="ProductComponentLine.position",
    )


class ProductComponentLine(Base):
    __tablename__ = "product_components"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(String(64), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    # Soft reference: components may be deleted while recipes still name them
    component_id = Column(String(64), nullable=False)
    quantity = Column(Float, nullable=False, default=1.0)
    position = Column(Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="recipe_lines")
