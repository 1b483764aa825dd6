from typing import List, Optional, Tuple

from .models import Offer, OfferType


def round_half_up_percent(cart_value: int, percent: int) -> int:
    # floor(c * p / 100 + 1/2), exact in integers
    return (2 * cart_value * percent + 100) // 200


def compute_discount(offer: Offer, cart_value: int) -> int:
    if offer.offer_type is OfferType.FLAT_AMOUNT:
        discount = offer.offer_value
    elif offer.offer_type is OfferType.FLAT_PERCENT:
        discount = round_half_up_percent(cart_value, offer.offer_value)
    else:
        raise ValueError(f"Unsupported offer type: {offer.offer_type!r}")

    # discount cannot exceed cart value and cannot be negative
    return max(0, min(discount, cart_value))


def apply_discount(offer: Offer, cart_value: int) -> int:
    return cart_value - compute_discount(offer, cart_value)


def pick_best_offer(offers: List[Offer], cart_value: int) -> Optional[Tuple[Offer, int]]:
    """
    offers: candidate offers for one restaurant/segment
    Rule:
     1. Highest discount amount for this cart value
     2. If tie, lowest offer id (first registered wins)
    """
    if not offers:
        return None

    scored = [(offer, compute_discount(offer, cart_value)) for offer in offers]
    scored.sort(
        key=lambda od: (
            -od[1],         # highest discount first
            od[0].id,       # earliest registration
        )
    )
    return scored[0]
