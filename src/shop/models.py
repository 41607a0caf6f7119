# dataclass models shared by the catalog, cart and order components

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple, Union

ProductId = Union[int, str]


def _to_float(val, default: float = 0.0) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def _to_int(val, default: int = 0) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Category:
    id: ProductId
    name: str


@dataclass(frozen=True)
class Product:
    id: ProductId
    name: str
    description: str
    price: float
    stock: int
    rating: float
    category: Optional[Category] = None
    image: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Product":
        """
        Build a Product from one record of the catalog service.

        Only `id` is mandatory. Numeric fields that fail to parse fall back to
        zero; a missing or malformed category becomes None.
        """
        category = None
        cat = raw.get("category")
        if isinstance(cat, Mapping) and cat.get("id") is not None:
            category = Category(id=cat["id"], name=str(cat.get("name") or ""))

        return cls(
            id=raw["id"],
            name=str(raw.get("name") or ""),
            description=str(raw.get("description") or ""),
            price=max(_to_float(raw.get("price")), 0.0),
            stock=_to_int(raw.get("stock")),
            rating=_to_float(raw.get("rating")),
            category=category,
            image=raw.get("image"),
        )

    @property
    def category_name(self) -> str:
        return self.category.name if self.category else "Uncategorized"


@dataclass(frozen=True)
class CartLine:
    product_id: ProductId
    name: str
    price: float  # unit price captured when the product was first added
    image: Optional[str]
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


@dataclass(frozen=True)
class Order:
    id: int
    lines: Tuple[CartLine, ...]
    total: float
    created_at: datetime
    status: str = "pending"

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


@dataclass(frozen=True)
class UserProfile:
    uid: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    email_verified: bool = False
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.display_name or self.email

    @property
    def initial(self) -> str:
        source = self.first_name or self.email
        return source[:1].upper()
