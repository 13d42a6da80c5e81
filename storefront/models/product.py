from sqlalchemy import Column, String, ForeignKey, Numeric, Text, JSON
from sqlalchemy.orm import relationship
from storefront.core.database import Base
from storefront.models.base import CreatedAtMixin, TimestampMixin, new_id


class Category(Base, CreatedAtMixin):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(128), nullable=False)

    products = relationship("Product", back_populates="category")


class Product(Base, TimestampMixin):
    """Catalog row. The storefront only reads products; they are managed elsewhere."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(512), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    long_description = Column(Text, nullable=True)
    roast_level = Column(String(64), nullable=True)
    origin = Column(String(128), nullable=True)
    flavor_notes = Column(JSON, nullable=True)
    weight = Column(String(32), nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)

    category = relationship("Category", back_populates="products")
