"""Tests for product and message rendering."""

import pytest

from shopassist.assistant.directory import SessionEntry
from shopassist.assistant.models import Message, Product
from shopassist.assistant.render import (
    WELCOME_TITLE,
    directory_text,
    format_price,
    message_text,
    render_conversation,
    render_message,
    render_product_card,
)


@pytest.fixture
def product(sample_product):
    return Product.model_validate(sample_product)


def test_format_price():
    assert format_price(2499) == "₹2499.00"
    assert format_price(19.5) == "₹19.50"


def test_discounted_product_shows_both_prices(product):
    """Test that a discount renders the new price and the struck-through original."""
    html = render_product_card(product)

    assert '<span class="price">₹2499.00</span>' in html
    assert '<s class="price-original">₹2999.00</s>' in html


@pytest.mark.parametrize("discounted", [2999.0, None, 3500.0, 0])
def test_undiscounted_product_shows_only_price(sample_product, discounted):
    """Test that equal, unset, zero or higher discounted prices show only the price."""
    product = Product.model_validate({**sample_product, "discounted_price": discounted})

    html = render_product_card(product)

    assert product.has_discount is False
    assert '<span class="price">₹2999.00</span>' in html
    assert "<s " not in html


def test_card_escapes_remote_text(sample_product):
    product = Product.model_validate(
        {**sample_product, "title": "<script>alert(1)</script>", "brand": "A&B"}
    )

    html = render_product_card(product)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "A&amp;B" in html


def test_card_links_out_and_shows_brand(product):
    html = render_product_card(product)

    assert 'href="https://shop.example.com/p-1"' in html
    assert 'target="_blank"' in html
    assert "Brand: <span>Stride</span>" in html


def test_card_without_brand(sample_product):
    product = Product.model_validate({**sample_product, "brand": None})

    assert "Brand:" not in render_product_card(product)


def test_message_lists_products(product):
    message = Message(id="a-1", role="assistant", content="Try these", products=[product])

    html = render_message(message)

    assert "Recommended Products (1)" in html
    assert 'data-product-id="p-1"' in html


def test_empty_conversation_shows_welcome():
    assert WELCOME_TITLE in render_conversation([])


def test_conversation_keeps_message_order():
    messages = [
        Message(id="u-1", role="user", content="first"),
        Message(id="a-1", role="assistant", content="second"),
    ]

    html = render_conversation(messages)

    assert html.index("first") < html.index("second")


def test_message_text(product):
    message = Message(id="a-1", role="assistant", content="Try these", products=[product])

    text = message_text(message)

    assert text.startswith("Assistant: Try these")
    assert "[1] Trail Running Shoes - ₹2499.00 (was ₹2999.00)" in text


def test_directory_text():
    entries = [
        SessionEntry("s-1", "Session s-1", "5m ago", True),
        SessionEntry("s-2", "Session s-2", "2d ago", False),
    ]

    assert directory_text(entries) == "* 1. Session s-1  5m ago\n  2. Session s-2  2d ago"
    assert directory_text([]) == "No sessions yet"
