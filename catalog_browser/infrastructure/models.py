"""SQLAlchemy models for the product catalog.

Defines the products table the SQL product store queries.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog_browser.infrastructure.database import Base


class Product(Base):
    """Product row in the catalog.

    Attributes:
        id: Unique product identifier.
        name: Product name.
        description: Product description.
        brand: Brand name.
        category_id: Category identifier.
        price: Current selling price in major units.
        compare_at_price: Price before discount.
        discount_percentage: Discount applied to compare_at_price.
        stock_quantity: Available quantity.
        rating: Average rating (0.0-5.0), null when unrated.
        image_url: Product image URL.
        is_active: Whether the product is listed in the storefront.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    category_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    compare_at_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    discount_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0")
    )
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating: Mapped[Decimal | None] = mapped_column(Numeric(2, 1), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, name={self.name[:30]}...)>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to the row shape product stores return.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "brand": self.brand,
            "category_id": self.category_id,
            "price": self.price,
            "compare_at_price": self.compare_at_price,
            "discount_percentage": self.discount_percentage,
            "stock_quantity": self.stock_quantity,
            "rating": self.rating,
            "image_url": self.image_url,
        }
