from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, Field

from .errors import InvalidOfferError


class OfferType(str, Enum):
    FLAT_AMOUNT = "FLATX"
    FLAT_PERCENT = "FLAT%"

    @classmethod
    def parse(cls, raw) -> "OfferType":
        """
        Accepts the wire code ("FLATX", "FLAT%") or the member name
        ("FLAT_AMOUNT", "FLAT_PERCENT"), case-insensitively.
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise InvalidOfferError(f"offer_type must be a string, got {raw!r}")

        key = raw.strip().upper()
        for member in cls:
            if key in (member.value, member.name):
                return member
        raise InvalidOfferError(f"Unrecognized offer_type: {raw!r}")


class Offer(BaseModel):
    id: int
    restaurant_id: int
    offer_type: OfferType
    offer_value: int
    customer_segments: Tuple[str, ...] = ()

    model_config = {"frozen": True}

    def matches(self, segment: str) -> bool:
        return segment in self.customer_segments


class OfferCreateRequest(BaseModel):
    restaurant_id: int
    offer_type: str  # "FLATX" or "FLAT%"
    offer_value: int
    customer_segment: List[str] = Field(default_factory=list)


class OfferCreateResponse(BaseModel):
    response_msg: str = "success"
    offer: Offer


class ApplyOfferRequest(BaseModel):
    cart_value: int
    user_id: int
    restaurant_id: int


class ApplyOfferResponse(BaseModel):
    cart_value: int
