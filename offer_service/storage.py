import itertools
import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import InvalidOfferError, NotFoundError
from .models import Offer, OfferType

logger = logging.getLogger(__name__)


def _validate_value(offer_type: OfferType, offer_value) -> int:
    if isinstance(offer_value, bool) or not isinstance(offer_value, int):
        raise InvalidOfferError(f"offer_value must be an integer, got {offer_value!r}")
    if offer_value < 0:
        raise InvalidOfferError(f"offer_value must be non-negative, got {offer_value}")
    if offer_type is OfferType.FLAT_PERCENT and offer_value > 100:
        raise InvalidOfferError(f"percent offer_value must be at most 100, got {offer_value}")
    return offer_value


def _validate_segments(customer_segments: Iterable[str]) -> Tuple[str, ...]:
    if isinstance(customer_segments, str):
        raise InvalidOfferError("customer_segments must be a collection of labels, not a string")

    segments: List[str] = []
    for segment in customer_segments:
        if not isinstance(segment, str):
            raise InvalidOfferError(f"customer segment must be a string, got {segment!r}")
        if segment not in segments:
            segments.append(segment)
    return tuple(segments)


class OfferStore:
    """
    In-memory offers keyed by restaurant.

    Writers are serialised per restaurant. Each restaurant's offers are kept
    as a tuple that is swapped wholesale, so readers always see either the
    state before or after a registration.
    """

    def __init__(self):
        self._offers: Dict[int, Tuple[Offer, ...]] = {}
        self._locks: Dict[int, threading.Lock] = {}
        self._guard = threading.Lock()
        self._ids = itertools.count(1)

    def _lock_for(self, restaurant_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(restaurant_id)
            if lock is None:
                lock = self._locks[restaurant_id] = threading.Lock()
            return lock

    def _next_id(self) -> int:
        with self._guard:
            return next(self._ids)

    def add(self, restaurant_id: int, offer_type, offer_value, customer_segments: Iterable[str]) -> Offer:
        parsed_type = OfferType.parse(offer_type)
        value = _validate_value(parsed_type, offer_value)
        segments = _validate_segments(customer_segments)

        with self._lock_for(restaurant_id):
            offer = Offer(
                id=self._next_id(),
                restaurant_id=restaurant_id,
                offer_type=parsed_type,
                offer_value=value,
                customer_segments=segments,
            )
            self._offers[restaurant_id] = self._offers.get(restaurant_id, ()) + (offer,)

        logger.info(
            "Registered offer %s for restaurant %s: %s %s for segments %s",
            offer.id, restaurant_id, parsed_type.value, value, segments,
        )
        return offer

    def candidates_for(self, restaurant_id: int, segment: Optional[str]) -> List[Offer]:
        if segment is None:
            return []
        snapshot = self._offers.get(restaurant_id, ())
        return [offer for offer in snapshot if offer.matches(segment)]

    def offers_for(self, restaurant_id: int) -> List[Offer]:
        snapshot = self._offers.get(restaurant_id, ())
        if not snapshot:
            raise NotFoundError(f"No offers registered for restaurant {restaurant_id}")
        return list(snapshot)

    def all_offers(self) -> List[Offer]:
        offers = [offer for snapshot in list(self._offers.values()) for offer in snapshot]
        return sorted(offers, key=lambda o: o.id)

    def remove(self, offer_id: int) -> Offer:
        for restaurant_id, snapshot in list(self._offers.items()):
            if any(offer.id == offer_id for offer in snapshot):
                break
        else:
            raise NotFoundError(f"Offer {offer_id} not found")

        with self._lock_for(restaurant_id):
            current = self._offers.get(restaurant_id, ())
            removed = next((o for o in current if o.id == offer_id), None)
            if removed is None:
                raise NotFoundError(f"Offer {offer_id} not found")
            self._offers[restaurant_id] = tuple(o for o in current if o.id != offer_id)

        logger.info("Withdrew offer %s from restaurant %s", offer_id, restaurant_id)
        return removed
