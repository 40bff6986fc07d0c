#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Trade Simulator
Random walk price feed for paper trading one share at a time, ticked by
an APScheduler interval job

Version: 1.0.0
Date: 2026-10-18
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from thanos_finance.config import MarketConfig, config
from thanos_finance.utils.datetime_utils import utc_timestamp

logger = logging.getLogger(__name__)

SEED_PRICE = 100.0
SEED_VOLATILITY = 0.05
TICK_VOLATILITY = 0.03
TREND_SHIFT_CHANCE = 0.1
TREND_RANGE = 0.05
MIN_PRICE = 1.0

@dataclass
class PricePoint:
    time: str
    price: float

    def to_dict(self) -> Dict[str, Any]:
        return {'time': self.time, 'price': round(self.price, 4)}

class MarketSimulator:
    """Paper trading account over a simulated ticker"""

    def __init__(self, market_config: Optional[MarketConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = market_config or config.market
        self.rng = rng or random.Random()
        self.start_cash = self.config.start_cash
        self.cash = self.start_cash
        self.shares = 0
        self.trend = 0.0
        self.ticks = 0
        self.window: List[PricePoint] = self._seed_window()

    def _seed_window(self) -> List[PricePoint]:
        window = []
        price = SEED_PRICE
        for index in range(self.config.window_size):
            window.append(PricePoint(time=str(index), price=price))
            price = price * (1 + (self.rng.random() - 0.5) * SEED_VOLATILITY)
        return window

    @property
    def price(self) -> float:
        return self.window[-1].price

    @property
    def equity(self) -> float:
        return self.cash + self.shares * self.price

    @property
    def profit(self) -> float:
        return self.equity - self.start_cash

    def tick(self) -> float:
        """Advance the feed by one point and return the new price"""
        change = (self.rng.random() - 0.5 + self.trend) * TICK_VOLATILITY
        new_price = max(MIN_PRICE, self.price * (1 + change))

        if self.rng.random() < TREND_SHIFT_CHANCE:
            self.trend = (self.rng.random() - 0.5) * TREND_RANGE
            logger.debug(f"Market trend shifted to {self.trend:+.4f}")

        self.window = self.window[1:] + [PricePoint(time=utc_timestamp(), price=new_price)]
        self.ticks += 1
        return new_price

    def buy(self) -> bool:
        """Buy one share at the current price when cash allows"""
        price = self.price
        if self.cash < price:
            return False
        self.cash -= price
        self.shares += 1
        logger.info(f"📈 Bought 1 share at {price:.2f}, holding {self.shares}")
        return True

    def sell(self) -> bool:
        """Sell one share at the current price when holding any"""
        if self.shares <= 0:
            return False
        price = self.price
        self.cash += price
        self.shares -= 1
        logger.info(f"📉 Sold 1 share at {price:.2f}, holding {self.shares}")
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'price': round(self.price, 4),
            'cash': round(self.cash, 2),
            'shares': self.shares,
            'equity': round(self.equity, 2),
            'profit': round(self.profit, 2),
            'ticks': self.ticks,
            'history': [point.to_dict() for point in self.window]
        }

class MarketTicker:
    """Runs MarketSimulator.tick on an interval"""

    JOB_ID = "market_tick"

    def __init__(self, simulator: MarketSimulator, interval_seconds: Optional[float] = None,
                 scheduler: Optional[AsyncIOScheduler] = None):
        self.simulator = simulator
        self.interval_seconds = interval_seconds or simulator.config.tick_seconds
        self.scheduler = scheduler or AsyncIOScheduler()

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        """Must be called from inside a running event loop"""
        if self.running:
            return
        self.scheduler.add_job(
            self.simulator.tick,
            IntervalTrigger(seconds=self.interval_seconds),
            id=self.JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        self.scheduler.start()
        logger.info(f"⏱️ Market ticker started ({self.interval_seconds}s)")

    def stop(self) -> None:
        if not self.running:
            return
        self.scheduler.shutdown(wait=False)
        logger.info("Market ticker stopped")
