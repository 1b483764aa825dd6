import logging
from typing import Iterable, List

from .errors import InvalidRequestError, SegmentLookupError
from .logic import apply_discount, pick_best_offer
from .models import Offer
from .segments import SegmentResolver
from .storage import OfferStore

logger = logging.getLogger(__name__)


class OfferApplicationService:
    """
    Registers offers and applies the best matching one to a cart.

    With ``fallback_to_no_segment`` a failed segment lookup leaves the cart
    unchanged instead of raising ``SegmentLookupError``.
    """

    def __init__(self, store: OfferStore, resolver: SegmentResolver, fallback_to_no_segment: bool = False):
        self.store = store
        self.resolver = resolver
        self.fallback_to_no_segment = fallback_to_no_segment

    def register(self, restaurant_id: int, offer_type, offer_value, customer_segments: Iterable[str]) -> Offer:
        return self.store.add(restaurant_id, offer_type, offer_value, customer_segments)

    def offers_for(self, restaurant_id: int) -> List[Offer]:
        return self.store.offers_for(restaurant_id)

    def all_offers(self) -> List[Offer]:
        return self.store.all_offers()

    def withdraw(self, offer_id: int) -> Offer:
        return self.store.remove(offer_id)

    def apply(self, user_id: int, restaurant_id: int, cart_value: int) -> int:
        if isinstance(cart_value, bool) or not isinstance(cart_value, int):
            raise InvalidRequestError(f"cart_value must be an integer, got {cart_value!r}")
        if cart_value < 0:
            raise InvalidRequestError(f"cart_value must be non-negative, got {cart_value}")

        try:
            segment = self.resolver.resolve(user_id)
        except SegmentLookupError:
            if not self.fallback_to_no_segment:
                raise
            logger.warning("Segment lookup failed for user %s, applying no offer", user_id)
            return cart_value

        candidates = self.store.candidates_for(restaurant_id, segment)
        best = pick_best_offer(candidates, cart_value)
        if best is None:
            logger.debug(
                "No offer for user %s (segment %s) at restaurant %s", user_id, segment, restaurant_id
            )
            return cart_value

        best_offer, discount = best
        logger.debug(
            "Applying offer %s to user %s at restaurant %s: discount %s on %s",
            best_offer.id, user_id, restaurant_id, discount, cart_value,
        )
        return apply_discount(best_offer, cart_value)
