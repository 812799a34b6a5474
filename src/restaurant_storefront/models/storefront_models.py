"""Storefront data models.

These models mirror the records served by the restaurant API. Products,
categories and basket lines are owned by the server; the storefront only
reads them and sends basket mutation requests back.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class Product(BaseModel):
    """Menu product model."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(..., description="Unique identifier for the product")
    name: str = Field(..., description="Product name")
    price: Decimal = Field(..., description="Unit price", ge=0)
    image: str | None = Field(None, description="URL to product image")
    vegeterian: bool = Field(default=False, description="Whether the product is vegeterian")
    nuts: bool = Field(default=False, description="Whether the product contains nuts")
    spiciness: int = Field(default=0, description="Spiciness level, 0 means not spicy", ge=0)
    category_id: int | None = Field(None, alias="categoryId", description="Owning category")

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: object) -> object:
        """Convert float prices to Decimal through their string form."""
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator("spiciness", mode="before")
    @classmethod
    def default_spiciness(cls, v: object) -> object:
        """Treat a missing spiciness as not spicy."""
        return 0 if v is None else v


class Category(BaseModel):
    """Menu category with its products inline."""

    id: int = Field(..., description="Unique identifier for the category")
    name: str = Field(default="", description="Category name")
    products: list[Product] = Field(default_factory=list, description="Products in the category")

    @field_validator("products", mode="before")
    @classmethod
    def default_products(cls, v: object) -> object:
        """The API sends null for a category without products."""
        return [] if v is None else v


class BasketLine(BaseModel):
    """One basket line per distinct product.

    The ``price`` field is the line total, ``quantity * product.price``.
    """

    quantity: int = Field(..., description="Number of units in the basket", ge=1)
    price: Decimal = Field(..., description="Line total", ge=0)
    product: Product = Field(..., description="The product this line refers to")

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: object) -> object:
        """Convert float prices to Decimal through their string form."""
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @property
    def product_id(self) -> int:
        """Identifier of the product on this line."""
        return self.product.id

    @property
    def unit_price(self) -> Decimal:
        """Unit price of the product on this line."""
        return self.product.price


class BasketItemRequest(BaseModel):
    """Request body for adding or updating a basket line."""

    model_config = ConfigDict(populate_by_name=True)

    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0)
    product_id: int = Field(..., alias="productId")

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        """The API expects prices as JSON numbers."""
        return float(price)

    def to_payload(self) -> dict:
        """Build the JSON payload sent to the basket endpoints."""
        return self.model_dump(by_alias=True)


class FilterState(BaseModel):
    """Attribute filters held in the visitor session."""

    model_config = ConfigDict(frozen=True)

    vegeterian: bool = Field(default=False, description="Only vegeterian products")
    nuts: bool = Field(default=False, description="Exclude products containing nuts")
    spiciness: int = Field(default=0, description="Exact spiciness, 0 means no constraint", ge=0)

    @property
    def is_default(self) -> bool:
        """True when no constraint is active."""
        return not self.vegeterian and not self.nuts and self.spiciness == 0

    def matches(self, product: Product) -> bool:
        """Check a product against every active constraint."""
        if self.vegeterian and not product.vegeterian:
            return False
        if self.nuts and product.nuts:
            return False
        if self.spiciness > 0 and product.spiciness != self.spiciness:
            return False
        return True
