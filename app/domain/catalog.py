# app/domain/catalog.py
"""Static product catalog: gender -> category -> products."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from app.core.config import settings
from app.domain.models.session import Gender, Product

# i18n key per category button label
CATEGORY_LABEL_KEYS = {
    "perfumes": "CATEGORY_PERFUMES",
    "deodorants": "CATEGORY_DEODORANTS",
    "body sprays": "CATEGORY_BODY_SPRAYS",
}


def _p(pid: int, name: str, price: str) -> Product:
    return Product(id=pid, name=name, price=Decimal(price))


PRODUCT_DATA: Dict[Gender, Dict[str, List[Product]]] = {
    Gender.MEN: {
        "perfumes": [
            _p(1, "XYZ Cologne", "50"),
            _p(2, "Sporty Fresh", "45"),
            _p(3, "Classic Wood", "55"),
        ],
        "deodorants": [
            _p(4, "Cool Breeze Deo", "20"),
            _p(5, "FreshSport Deo", "25"),
            _p(6, "Musk Shield Deo", "30"),
        ],
        "body sprays": [
            _p(7, "Ocean Body Spray", "18"),
            _p(8, "Citrus Mist", "22"),
            _p(9, "Rock Solid", "25"),
        ],
    },
    Gender.WOMEN: {
        "perfumes": [
            _p(10, "Floral Dream", "60"),
            _p(11, "Citrus Bloom", "55"),
            _p(12, "Vanilla Essence", "65"),
        ],
        "deodorants": [
            _p(13, "Gentle Rose Deo", "28"),
            _p(14, "Lavender Fresh Deo", "27"),
            _p(15, "Pure Blossom Deo", "30"),
        ],
        "body sprays": [
            _p(16, "Summer Splash", "20"),
            _p(17, "Sweet Magnolia", "24"),
            _p(18, "Soft Cloud", "26"),
        ],
    },
}


class Catalog:
    def __init__(self, data: Dict[Gender, Dict[str, List[Product]]]):
        self._data = data

    def categories(self, gender: Optional[Gender]) -> List[str]:
        if gender is None:
            return []
        return list(self._data.get(gender, {}).keys())

    def has_category(self, gender: Optional[Gender], category: str) -> bool:
        return category in self.categories(gender)

    def products_for(self, gender: Optional[Gender], category: Optional[str]) -> List[Product]:
        if gender is None or category is None:
            return []
        return list(self._data.get(gender, {}).get(category, []))

    def find_product(
        self, gender: Optional[Gender], category: Optional[str], product_id
    ) -> Optional[Product]:
        """Resolve an option id (str or int) to a product of the given gender/category."""
        try:
            pid = int(str(product_id).strip())
        except (TypeError, ValueError):
            return None
        for product in self.products_for(gender, category):
            if product.id == pid:
                return product
        return None


CATALOG = Catalog(PRODUCT_DATA)


def format_price(amount: Decimal, symbol: Optional[str] = None) -> str:
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    return f"{symbol}{Decimal(amount):,.2f}"
