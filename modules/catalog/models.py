"""
Catalog Module - Models
========================
Product and Catalog: the immutable, read-only product dataset.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from common.helpers import slugify


# ==========================================
# 📦 Product
# ==========================================

@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: int  # smallest currency unit (Rupiah)
    description: str = ""
    image: Optional[str] = None
    is_new: bool = False

    def __repr__(self):
        return f"<Product {self.id} {self.name}>"


def is_valid_product(product) -> bool:
    """Positive int id, non-empty name, non-negative int price."""
    if product is None:
        return False
    pid = getattr(product, "id", None)
    name = getattr(product, "name", None)
    price = getattr(product, "price", None)
    if not isinstance(pid, int) or isinstance(pid, bool) or pid < 1:
        return False
    if not isinstance(name, str) or not name.strip():
        return False
    if not isinstance(price, int) or isinstance(price, bool) or price < 0:
        return False
    return True


# ==========================================
# 🗂️ Catalog
# ==========================================

CATEGORY_ICONS = {
    "Main Dishes": "fa-utensils",
    "Drinks": "fa-glass-water",
    "Desserts": "fa-ice-cream",
}
DEFAULT_CATEGORY_ICON = "fa-utensils"


class Catalog:
    """Ordered mapping of category name -> products. Never written after load."""

    def __init__(self, categories: Dict[str, Tuple[Product, ...]]):
        self._categories = {name: tuple(products) for name, products in categories.items()}
        self._by_id = {p.id: p for products in self._categories.values() for p in products}

    def __len__(self):
        return len(self._by_id)

    def __iter__(self) -> Iterator[Product]:
        return iter(self.all_products())

    def get(self, product_id: int) -> Optional[Product]:
        return self._by_id.get(product_id)

    def all_products(self) -> List[Product]:
        return [p for products in self._categories.values() for p in products]

    def filters(self) -> List[Tuple[str, str]]:
        """(slug, label) pairs for the category filter bar, 'all' first."""
        return [("all", "All")] + [(slugify(name), name) for name in self._categories]

    def categories(self, filter_slug: str = "all") -> List[Tuple[str, Tuple[Product, ...]]]:
        """Categories matching the filter slug, in catalog order. Unknown slugs match nothing."""
        if not filter_slug or filter_slug == "all":
            return list(self._categories.items())
        return [(name, products) for name, products in self._categories.items()
                if slugify(name) == filter_slug]

    @staticmethod
    def icon_for(category_name: str) -> str:
        return CATEGORY_ICONS.get(category_name, DEFAULT_CATEGORY_ICON)
