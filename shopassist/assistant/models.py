"""Data models shared by the assistant client.

All remote-sourced models ignore unknown fields and are frozen: products and
messages are never mutated once created.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]


class Product(BaseModel):
    """A recommended product as returned by the remote API."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str
    title: str
    price: float
    discounted_price: Optional[float] = None
    url: str = ""
    image: str = ""
    description: str = ""
    brand: Optional[str] = None
    category: Optional[str] = None
    score: Optional[float] = None
    rank: Optional[int] = None

    @property
    def has_discount(self) -> bool:
        """True only when a non-zero discounted price is strictly below the price."""
        return bool(self.discounted_price) and self.discounted_price < self.price


class Message(BaseModel):
    """One entry of a conversation."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    content: str
    products: Optional[List[Product]] = None


class Session(BaseModel):
    """A remote conversation session; ``updated_at`` drives the directory label."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str
    created_at: str = ""
    updated_at: str = ""

    @property
    def label(self) -> str:
        return f"Session {self.id[:8]}"


class ChatReply(BaseModel):
    """Parsed response of a send.

    Attributes:
        session_id: Session the remote API bound the message to, if any.
        user_id: User id the remote API associated with the caller, if any.
        content: Assistant text, or the fallback text when absent.
        products: Recommended products, empty when absent or malformed.
    """

    session_id: Optional[str] = None
    user_id: Optional[str] = None
    content: str
    products: List[Product] = Field(default_factory=list)
