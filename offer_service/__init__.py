from .errors import (
    InvalidOfferError,
    InvalidRequestError,
    NotFoundError,
    OfferServiceError,
    SegmentLookupError,
)
from .models import Offer, OfferType
from .service import OfferApplicationService
from .storage import OfferStore

__all__ = [
    "InvalidOfferError",
    "InvalidRequestError",
    "NotFoundError",
    "Offer",
    "OfferApplicationService",
    "OfferServiceError",
    "OfferStore",
    "OfferType",
    "SegmentLookupError",
]
