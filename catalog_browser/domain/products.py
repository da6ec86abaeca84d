"""Product read model.

ProductSummary is owned by the remote store. The controller treats it
as immutable once fetched and only ever reads it.
"""

from dataclasses import asdict, dataclass
from typing import Any, Self

from catalog_browser.domain.base import ValueObject


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


@dataclass(frozen=True)
class ProductSummary(ValueObject):
    """Product row as listed in the catalog grid.

    Attributes:
        id: Product identifier.
        name: Display name.
        price: Current selling price in major currency units.
        stock_qty: Units available.
        category_id: Category the product belongs to.
        compare_at_price: Price before discount, if any.
        discount_pct: Discount percentage, if on sale.
        rating: Average rating (0.0-5.0), if rated.
        image_url: Product image URL.
        description: Long description.
        brand: Brand name.
    """

    id: str
    name: str
    price: float
    stock_qty: int
    category_id: str
    compare_at_price: float | None = None
    discount_pct: float | None = None
    rating: float | None = None
    image_url: str | None = None
    description: str | None = None
    brand: str | None = None

    @property
    def on_sale(self) -> bool:
        """Whether the product carries a positive discount."""
        return bool(self.discount_pct and self.discount_pct > 0)

    @property
    def in_stock(self) -> bool:
        """Whether at least one unit is available."""
        return self.stock_qty > 0

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Self:
        """Create a summary from a store row.

        Accepts both the read-model keys and the store column names
        (``stock_quantity``, ``discount_percentage``).

        Args:
            data: Row returned by a product store.

        Returns:
            ProductSummary instance.
        """
        stock = data.get("stock_qty", data.get("stock_quantity", 0))
        discount = data.get("discount_pct", data.get("discount_percentage"))
        category = data.get("category_id")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            price=float(data.get("price") or 0),
            stock_qty=int(stock or 0),
            category_id="" if category is None else str(category),
            compare_at_price=_optional_float(data.get("compare_at_price")),
            discount_pct=_optional_float(discount),
            rating=_optional_float(data.get("rating")),
            image_url=data.get("image_url"),
            description=data.get("description"),
            brand=data.get("brand"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return asdict(self)
