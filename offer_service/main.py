import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .errors import InvalidOfferError, InvalidRequestError, NotFoundError, SegmentLookupError
from .models import (
    ApplyOfferRequest,
    ApplyOfferResponse,
    Offer,
    OfferCreateRequest,
    OfferCreateResponse,
)
from .segments import HttpSegmentResolver
from .service import OfferApplicationService
from .storage import OfferStore

# ---------------------------
# Wiring
# ---------------------------

ERROR_STATUS = {
    InvalidOfferError: 400,
    InvalidRequestError: 400,
    NotFoundError: 404,
    SegmentLookupError: 502,
}


def build_service(settings: Settings) -> OfferApplicationService:
    resolver = HttpSegmentResolver(
        settings.segment_service_url,
        timeout=settings.segment_lookup_timeout,
    )
    return OfferApplicationService(
        OfferStore(),
        resolver,
        fallback_to_no_segment=settings.segment_fallback_to_no_segment,
    )


def get_service(request: Request) -> OfferApplicationService:
    return request.app.state.service


def create_app(service: Optional[OfferApplicationService] = None) -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    owns_service = service is None
    if owns_service:
        service = build_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_service:
            service.resolver.close()

    app = FastAPI(title="Restaurant Offer Service", lifespan=lifespan)
    app.state.service = service

    for exc_type, status_code in ERROR_STATUS.items():
        app.add_exception_handler(exc_type, _error_handler(status_code))

    _register_routes(app)
    return app


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler


# ---------------------------
# Routes
# ---------------------------

def _register_routes(app: FastAPI) -> None:

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.post("/api/v1/offer", response_model=OfferCreateResponse)
    def create_offer(payload: OfferCreateRequest, service: OfferApplicationService = Depends(get_service)):
        offer = service.register(
            payload.restaurant_id,
            payload.offer_type,
            payload.offer_value,
            payload.customer_segment,
        )
        return OfferCreateResponse(offer=offer)

    @app.get("/api/v1/offer", response_model=List[Offer])
    def list_offers(restaurant_id: int, service: OfferApplicationService = Depends(get_service)):
        return service.offers_for(restaurant_id)

    @app.get("/api/v1/offers", response_model=List[Offer])
    def list_all_offers(service: OfferApplicationService = Depends(get_service)):
        return service.all_offers()

    @app.delete("/api/v1/offer/{offer_id}", response_model=Offer)
    def withdraw_offer(offer_id: int, service: OfferApplicationService = Depends(get_service)):
        return service.withdraw(offer_id)

    @app.post("/api/v1/cart/apply_offer", response_model=ApplyOfferResponse)
    def apply_offer(payload: ApplyOfferRequest, service: OfferApplicationService = Depends(get_service)):
        final_value = service.apply(payload.user_id, payload.restaurant_id, payload.cart_value)
        return ApplyOfferResponse(cart_value=final_value)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "offer_service.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
    )
