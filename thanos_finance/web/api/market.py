from fastapi import APIRouter, Depends

from thanos_finance.services.market import MarketSimulator
from thanos_finance.web.dependencies import get_market

router = APIRouter(prefix="/api/market", tags=["market"])

@router.get("")
async def get_market_state(market: MarketSimulator = Depends(get_market)):
    return market.to_dict()

@router.post("/buy")
async def buy_share(market: MarketSimulator = Depends(get_market)):
    executed = market.buy()
    return {'executed': executed, **market.to_dict()}

@router.post("/sell")
async def sell_share(market: MarketSimulator = Depends(get_market)):
    executed = market.sell()
    return {'executed': executed, **market.to_dict()}
