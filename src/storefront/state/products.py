"""The product record that flows through cart, comparison and checkout."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProductKind(Enum):
    STANDARD = "Standard"
    BUNDLE = "Bundle"


class ProductSnapshot(BaseModel):
    """Immutable copy of a catalogue product as the shopper saw it.

    Snapshots are taken when a product is added to the cart or the
    comparison bar; later catalogue edits do not leak into them.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str = Field(min_length=1)
    name: str
    price: float = Field(ge=0)
    discount: float = Field(default=0.0, ge=0, le=100)
    stock: int = Field(default=0, ge=0)
    images: tuple[str, ...] = ()
    category_id: str | None = None
    kind: ProductKind = ProductKind.STANDARD

    @property
    def discounted_price(self) -> float:
        return self.price * (1 - self.discount / 100)

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None
