from dataclasses import replace
from typing import Dict, Iterator, List, Optional

from shop.models import CartLine, Product, ProductId


class Cart:
    """
    Shopping cart keyed by product id.

    Lines keep first-insertion order. Each line holds a copy of the product's
    name, price and image taken when it was first added; adding the same
    product again only bumps the quantity.
    """

    def __init__(self) -> None:
        self._lines: Dict[ProductId, CartLine] = {}

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    def __contains__(self, product_id) -> bool:
        return product_id in self._lines

    def get(self, product_id: ProductId) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def add(self, product: Product) -> CartLine:
        line = self._lines.get(product.id)
        if line is not None:
            line = replace(line, quantity=line.quantity + 1)
        else:
            line = CartLine(
                product_id=product.id,
                name=product.name,
                price=product.price,
                image=product.image,
                quantity=1,
            )
        # dict assignment to an existing key keeps its position
        self._lines[product.id] = line
        return line

    def remove(self, product_id: ProductId) -> None:
        self._lines.pop(product_id, None)

    def set_quantity(self, product_id: ProductId, quantity: int) -> None:
        line = self._lines.get(product_id)
        if line is None:
            return
        if quantity < 1:
            del self._lines[product_id]
        else:
            self._lines[product_id] = replace(line, quantity=int(quantity))

    def total(self) -> float:
        return sum(line.price * line.quantity for line in self._lines.values())

    def unit_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def clear(self) -> None:
        self._lines.clear()
