"""HTML rendering for storefront fragments.

Records are turned into small view models first and then rendered through
autoescaped Jinja2 templates, so product data never reaches the markup
unescaped and every action carries its parameters as data attributes.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from restaurant_storefront.models.storefront_models import BasketLine, Category, FilterState, Product
from restaurant_storefront.services.basket_service import BasketBadge, calculate_basket_total

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

CURRENCY = "₾"
EMPTY_BASKET_MESSAGE = "Your basket is empty."
EMPTY_PRODUCTS_MESSAGE = "No products found."


def format_price(value: Decimal) -> str:
    """Format a price with two decimals and the currency sign."""
    amount = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{amount} {CURRENCY}"


def spiciness_label(level: int) -> str:
    """Label for a spiciness level, as shown next to the spice slider."""
    return "Not chosen" if level == 0 else f"{level} 🔥"


@dataclass(frozen=True)
class ProductCard:
    product_id: int
    name: str
    image: str | None
    price: str
    unit_price: Decimal
    vegeterian: bool
    nuts: bool
    spiciness: int

    @classmethod
    def from_product(cls, product: Product) -> "ProductCard":
        return cls(
            product_id=product.id,
            name=product.name,
            image=product.image,
            price=format_price(product.price),
            unit_price=product.price,
            vegeterian=product.vegeterian,
            nuts=product.nuts,
            spiciness=product.spiciness,
        )


@dataclass(frozen=True)
class BasketCard:
    product_id: int
    name: str
    image: str | None
    unit_price: Decimal
    price: str
    quantity: int
    line_total: str

    @classmethod
    def from_line(cls, line: BasketLine) -> "BasketCard":
        return cls(
            product_id=line.product_id,
            name=line.product.name,
            image=line.product.image,
            unit_price=line.unit_price,
            price=format_price(line.unit_price),
            quantity=line.quantity,
            line_total=format_price(line.price),
        )


@dataclass(frozen=True)
class BasketSummary:
    total: str


@dataclass(frozen=True)
class EmptyState:
    message: str


@dataclass(frozen=True)
class CategoryControl:
    category_id: int
    name: str
    selected: bool


class StorefrontRenderer:
    """Renders storefront view models to HTML strings."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR) -> None:
        self.environment = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _render(self, template_name: str, **context: object) -> str:
        return self.environment.get_template(template_name).render(**context)

    def render_products(self, products: list[Product]) -> str:
        """Render one card per product, or the empty state for no products."""
        if not products:
            return self.render_empty(EMPTY_PRODUCTS_MESSAGE)
        cards = [ProductCard.from_product(product) for product in products]
        return self._render("products.html", cards=cards)

    def render_basket(self, lines: list[BasketLine]) -> str:
        """Render one card per basket line followed by the basket total."""
        if not lines:
            return self.render_empty(EMPTY_BASKET_MESSAGE)
        cards = [BasketCard.from_line(line) for line in lines]
        summary = BasketSummary(total=format_price(calculate_basket_total(lines)))
        return self._render("basket.html", cards=cards, summary=summary)

    def render_empty(self, message: str) -> str:
        return self._render("empty.html", state=EmptyState(message=message))

    def render_badge(self, badge: BasketBadge | None) -> str:
        """Render the basket badge; a missing badge renders hidden."""
        return self._render("badge.html", badge=badge or BasketBadge(count=0, visible=False))

    def render_page(
        self,
        content: str,
        badge: BasketBadge | None,
        categories: list[Category],
        selected_category: int | None,
        filters: FilterState,
        theme: str,
    ) -> str:
        """Render the page shell around an already rendered content fragment."""
        controls = [
            CategoryControl(
                category_id=category.id,
                name=category.name,
                selected=category.id == selected_category,
            )
            for category in categories
        ]
        return self._render(
            "page.html",
            content=content,
            badge_html=self.render_badge(badge),
            categories=controls,
            all_selected=selected_category is None,
            filters=filters,
            spice_label=spiciness_label(filters.spiciness),
            theme=theme,
        )
