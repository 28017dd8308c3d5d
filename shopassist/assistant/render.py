"""Rendering of messages and product cards.

HTML output is used for transcript export; plain text output is used by the
terminal front end. Rendering is display formatting only: no field is
computed here beyond price formatting and the discount check on ``Product``.
"""

from html import escape
from typing import Iterable, List, Sequence

from shopassist.assistant.directory import SessionEntry
from shopassist.assistant.models import Message, Product

CURRENCY_SYMBOL = "₹"
PLACEHOLDER_IMAGE = "/shopping-assistant.png"
WELCOME_TITLE = "Welcome to ShopAssist AI"
WELCOME_TEXT = (
    "I'm your personal shopping assistant. Tell me what you're looking for, "
    "your budget, and I'll help you find the perfect products!"
)


def format_price(price: float) -> str:
    """Format a price with the currency symbol and two decimals."""
    return f"{CURRENCY_SYMBOL}{price:.2f}"


# -- HTML --


def render_product_card(product: Product) -> str:
    """Render one product as an HTML card.

    A discounted product shows the discounted price followed by the original
    price struck through; otherwise only the price is shown.
    """
    if product.has_discount:
        prices = (
            f'<span class="price">{format_price(product.discounted_price)}</span>'
            f'<s class="price-original">{format_price(product.price)}</s>'
        )
    else:
        prices = f'<span class="price">{format_price(product.price)}</span>'

    brand = ""
    if product.brand:
        brand = f'<div class="brand">Brand: <span>{escape(product.brand)}</span></div>'

    image = escape(product.image or PLACEHOLDER_IMAGE, quote=True)
    return (
        f'<div class="product-card" data-product-id="{escape(product.id, quote=True)}">'
        f'<img src="{image}" alt="{escape(product.title, quote=True)}" '
        f"onerror=\"this.src='{PLACEHOLDER_IMAGE}'\">"
        f"<h3>{escape(product.title)}</h3>"
        f'<div class="prices">{prices}</div>'
        f'<p class="description">{escape(product.description)}</p>'
        f"{brand}"
        f'<a href="{escape(product.url, quote=True)}" target="_blank" '
        f'rel="noopener noreferrer">View Product</a>'
        f"</div>"
    )


def render_message(message: Message) -> str:
    html = (
        f'<div class="message {message.role}" id="{escape(message.id, quote=True)}">'
        f'<p class="content">{escape(message.content)}</p>'
    )
    if message.products:
        cards = "".join(render_product_card(p) for p in message.products)
        html += (
            f'<div class="products">'
            f"<p>Recommended Products ({len(message.products)})</p>"
            f"{cards}</div>"
        )
    return html + "</div>"


def render_conversation(messages: Sequence[Message], title: str = "ShopAssist") -> str:
    """Render a full standalone HTML page for a conversation."""
    if messages:
        body = "\n".join(render_message(m) for m in messages)
    else:
        body = (
            f'<div class="welcome"><h2>{WELCOME_TITLE}</h2>'
            f"<p>{escape(WELCOME_TEXT)}</p></div>"
        )
    return (
        "<!DOCTYPE html>\n"
        f'<html><head><meta charset="utf-8"><title>{escape(title)}</title></head>\n'
        f"<body>\n{body}\n</body></html>\n"
    )


# -- Plain text --


def product_text(product: Product, number: int) -> List[str]:
    if product.has_discount:
        price = f"{format_price(product.discounted_price)} (was {format_price(product.price)})"
    else:
        price = format_price(product.price)

    lines = [f"  [{number}] {product.title} - {price}"]
    if product.brand:
        lines.append(f"      Brand: {product.brand}")
    if product.description:
        lines.append(f"      {product.description}")
    if product.url:
        lines.append(f"      {product.url}")
    return lines


def message_text(message: Message) -> str:
    speaker = "You" if message.role == "user" else "Assistant"
    lines = [f"{speaker}: {message.content}"]
    if message.products:
        lines.append(f"Recommended Products ({len(message.products)})")
        for number, product in enumerate(message.products, start=1):
            lines.extend(product_text(product, number))
    return "\n".join(lines)


def directory_text(entries: Iterable[SessionEntry]) -> str:
    lines = []
    for number, entry in enumerate(entries, start=1):
        marker = "*" if entry.is_current else " "
        lines.append(f"{marker} {number}. {entry.label}  {entry.updated}")
    return "\n".join(lines) if lines else "No sessions yet"
