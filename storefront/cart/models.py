"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from storefront.models import Product, ProductId, ProductRating
from storefront.services.money import multiply, to_decimal


@dataclass
class CartLineItem:
    """A product held in the cart together with its quantity."""
    id: ProductId
    title: str
    price: Decimal
    quantity: int = 1
    category: str = ""
    image: str = ""
    description: str = ""
    rating: ProductRating = field(default_factory=ProductRating)

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartLineItem":
        return cls(
            id=product.id,
            title=product.title,
            price=product.price,
            quantity=quantity,
            category=product.category,
            image=product.image,
            description=product.description,
            rating=product.rating,
        )

    @property
    def line_total(self) -> Decimal:
        """price × quantity, unrounded."""
        return multiply(self.price, self.quantity)

    def to_dict(self) -> dict:
        """Snapshot form. Price is kept as a string so no precision is lost."""
        return {
            "id": self.id,
            "title": self.title,
            "price": str(self.price),
            "category": self.category,
            "image": self.image,
            "description": self.description,
            "rating": self.rating.model_dump(),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLineItem":
        """
        Strict inverse of ``to_dict``.

        Raises KeyError, TypeError or ValueError on anything that would break
        a cart invariant, so a damaged snapshot is rejected as a whole.
        """
        item_id = data["id"]
        if isinstance(item_id, bool) or not isinstance(item_id, (int, str)):
            raise TypeError(f"Invalid line item id: {item_id!r}")

        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"Invalid quantity for item {item_id!r}: {quantity!r}")

        raw_price = data["price"]
        if isinstance(raw_price, bool) or not isinstance(raw_price, (str, int, float)):
            raise TypeError(f"Invalid price for item {item_id!r}: {raw_price!r}")
        try:
            price = Decimal(str(raw_price))
        except InvalidOperation as e:
            raise ValueError(f"Invalid price for item {item_id!r}: {raw_price!r}") from e
        if not price.is_finite() or price < 0:
            raise ValueError(f"Invalid price for item {item_id!r}: {raw_price!r}")

        title = data["title"]
        if not isinstance(title, str):
            raise TypeError(f"Invalid title for item {item_id!r}: {title!r}")
        for name in ("category", "image", "description"):
            if not isinstance(data.get(name, ""), str):
                raise TypeError(f"Invalid {name} for item {item_id!r}: {data[name]!r}")

        return cls(
            id=item_id,
            title=title,
            price=price,
            quantity=quantity,
            category=data.get("category", ""),
            image=data.get("image", ""),
            description=data.get("description", ""),
            rating=ProductRating.model_validate(data.get("rating") or {}),
        )


@dataclass(frozen=True)
class ShippingPolicy:
    """Flat fee unless the subtotal is strictly above the threshold."""
    free_shipping_threshold: Decimal = Decimal("50.00")
    flat_fee: Decimal = Decimal("10.00")

    def __post_init__(self):
        object.__setattr__(self, "free_shipping_threshold", to_decimal(self.free_shipping_threshold))
        object.__setattr__(self, "flat_fee", to_decimal(self.flat_fee))

    def fee_for(self, subtotal: Decimal) -> Decimal:
        if subtotal > self.free_shipping_threshold:
            return Decimal("0")
        return self.flat_fee

    def remaining_for_free_shipping(self, subtotal: Decimal) -> Decimal:
        """How much more must be spent before shipping becomes free."""
        if subtotal > self.free_shipping_threshold:
            return Decimal("0")
        return self.free_shipping_threshold - subtotal


@dataclass(frozen=True)
class CartSummary:
    """Derived totals for one state of the cart."""
    line_count: int
    item_count: int
    subtotal: Decimal
    shipping_fee: Decimal
    total: Decimal
    free_shipping_remaining: Decimal

    @property
    def free_shipping(self) -> bool:
        return self.shipping_fee == 0


@dataclass
class Cart:
    """Ordered collection of line items, first added first."""
    items: List[CartLineItem] = field(default_factory=list)

    def find(self, product_id: ProductId) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.id == product_id), None)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        """Total number of units in the cart."""
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    def summarize(self, policy: ShippingPolicy) -> CartSummary:
        subtotal = self.subtotal
        shipping_fee = policy.fee_for(subtotal)
        return CartSummary(
            line_count=len(self.items),
            item_count=self.item_count,
            subtotal=subtotal,
            shipping_fee=shipping_fee,
            total=subtotal + shipping_fee,
            free_shipping_remaining=policy.remaining_for_free_shipping(subtotal),
        )

    def copy_items(self) -> tuple:
        """Detached copies of the line items, safe to hand to callers."""
        return tuple(replace(item) for item in self.items)

    def to_list(self) -> list:
        return [item.to_dict() for item in self.items]

    @classmethod
    def from_list(cls, data: list) -> "Cart":
        """Rebuild a cart from its snapshot list; duplicate ids are rejected."""
        if not isinstance(data, list):
            raise TypeError(f"Cart snapshot must be a list, got {type(data).__name__}")
        items = [CartLineItem.from_dict(entry) for entry in data]
        seen = set()
        for item in items:
            if item.id in seen:
                raise ValueError(f"Duplicate line item id in snapshot: {item.id!r}")
            seen.add(item.id)
        return cls(items=items)
