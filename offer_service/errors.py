class OfferServiceError(Exception):
    """Base class for errors raised by the offer service."""


class InvalidOfferError(OfferServiceError):
    """Offer registration rejected: unknown type or value out of range."""


class InvalidRequestError(OfferServiceError):
    """Apply-offer request rejected before any offer logic ran."""


class SegmentLookupError(OfferServiceError):
    """The user-segment service failed (anything other than not-found)."""


class NotFoundError(OfferServiceError):
    """Unknown offer, or a restaurant with no registered offers."""
