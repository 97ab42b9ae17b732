# tests/test_catalog_i18n.py
"""Tests for the static catalog and the bilingual message catalog."""

from decimal import Decimal

import pytest

from app.domain.catalog import CATALOG, CATEGORY_LABEL_KEYS, format_price
from app.domain.i18n import FAQ_CONTENT, FAQ_LABEL_KEYS, MESSAGES, faq_text, t
from app.domain.models.session import Gender
from app.domain.services.conversation_engine import TICKET_TOPICS

CATEGORIES = ["perfumes", "deodorants", "body sprays"]


def test_every_gender_has_all_categories():
    for gender in Gender:
        assert CATALOG.categories(gender) == CATEGORIES


def test_product_ids_are_unique_across_catalog():
    ids = [
        p.id
        for gender in Gender
        for category in CATEGORIES
        for p in CATALOG.products_for(gender, category)
    ]
    assert len(ids) == 18
    assert len(set(ids)) == len(ids)


def test_find_product_accepts_string_ids():
    product = CATALOG.find_product(Gender.MEN, "perfumes", "1")

    assert product.name == "XYZ Cologne"
    assert product.price == Decimal("50")


def test_find_product_is_scoped_to_category():
    assert CATALOG.find_product(Gender.MEN, "deodorants", 1) is None
    assert CATALOG.find_product(Gender.WOMEN, "perfumes", 1) is None
    assert CATALOG.find_product(None, "perfumes", 1) is None
    assert CATALOG.find_product(Gender.MEN, "perfumes", "x1") is None


def test_format_price():
    assert format_price(Decimal("50")) == "$50.00"
    assert format_price(Decimal("1234.5"), "LYD ") == "LYD 1,234.50"


@pytest.mark.parametrize("key", sorted(MESSAGES))
def test_every_message_has_english(key):
    assert MESSAGES[key]["en"]


def test_arabic_lookup():
    assert t("BTN_CONFIRM", "ar") == "تأكيد"


def test_unknown_language_falls_back_to_english():
    assert t("BTN_CONFIRM", "fr") == "Confirm"
    assert t("BTN_CONFIRM", None) == "Confirm"


def test_missing_arabic_falls_back_to_english():
    assert t("BTN_LANG_EN", "ar") == "English"


def test_missing_key_returns_key():
    assert t("NO_SUCH_KEY", "en") == "NO_SUCH_KEY"


def test_placeholders_are_filled():
    assert t("ASK_QUANTITY", "en", name="Soft Cloud") == "How many of Soft Cloud would you like? (Type a number)"


def test_store_name_is_injected():
    assert "Confetti London LY" in t("GREETING", "en")


def test_label_keys_exist():
    keys = list(CATEGORY_LABEL_KEYS.values()) + list(FAQ_LABEL_KEYS.values()) + list(TICKET_TOPICS.values())
    for key in keys:
        assert key in MESSAGES
        assert MESSAGES[key].get("ar")


def test_faq_text_in_both_languages():
    for faq_id in FAQ_LABEL_KEYS:
        assert faq_id in FAQ_CONTENT
        assert faq_text(faq_id, "en") != faq_text(faq_id, "ar")
    assert faq_text("faq_unknown", "en") is None
