from __future__ import annotations

from fastapi import APIRouter

from rpos.application.dto.requests import CartRequest
from rpos.application.dto.responses import CartQuoteResponse
from rpos.application.use_cases.quote_cart import QuoteCart
from rpos.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository

router = APIRouter()


@router.post("/v1/cart/quote", response_model=CartQuoteResponse)
def quote_cart(request_dto: CartRequest) -> CartQuoteResponse:
    return QuoteCart(menu_repository=SqlAlchemyMenuRepository()).execute(request_dto)
