"""Trade Journal API Routes.

Open, close, cancel, delete and list the caller's trades.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from src.api.dependencies import get_journal_service, get_user_id
from src.api.models import CloseTradeRequest, CreateTradeRequest, TradeResponse
from src.api_errors import ErrorCode, NotFoundError
from src.journal import CloseTrade, JournalService, NewTrade, StatusFilter, TradeQuery

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/trades", tags=["Trades"])


@router.get("", response_model=list[TradeResponse])
def list_trades(
    status: StatusFilter = Query(default=StatusFilter.ALL),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    symbol: Optional[str] = None,
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    """Trades newest first, filtered by status, entry_time range and symbol."""
    query = TradeQuery(status=status, start=start, end=end, limit=limit, symbol_search=symbol)
    return journal.get_trades(user_id, query)


@router.post("", response_model=TradeResponse, status_code=201)
def create_trade(
    request: CreateTradeRequest,
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    return journal.create_trade(user_id, NewTrade(**request.model_dump()))


@router.get("/{trade_id}", response_model=TradeResponse)
def get_trade(
    trade_id: str,
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    trade = journal.get_trade(user_id, trade_id)
    if trade is None:
        raise NotFoundError(f"Trade {trade_id} not found", ErrorCode.TRADE_NOT_FOUND,
                            resource_type="trade", resource_id=trade_id)
    return trade


@router.post("/{trade_id}/close", response_model=TradeResponse)
def close_trade(
    trade_id: str,
    request: CloseTradeRequest,
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    return journal.close_trade(user_id, trade_id, CloseTrade(**request.model_dump()))


@router.post("/{trade_id}/cancel", response_model=TradeResponse)
def cancel_trade(
    trade_id: str,
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    return journal.cancel_trade(user_id, trade_id)


@router.delete("/{trade_id}", status_code=204)
def delete_trade(
    trade_id: str,
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    journal.delete_trade(user_id, trade_id)
    return Response(status_code=204)
