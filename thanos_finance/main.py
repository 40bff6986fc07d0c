#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Command Line Entry Point
serve, status, chat and reset-tutorial over the persisted store

Version: 1.0.0
Date: 2026-10-18
"""

import argparse
import asyncio
import sys
import logging
from typing import List, Optional

from thanos_finance.config import config
from thanos_finance.core.achievements import STONES
from thanos_finance.core.store import FinanceStore
from thanos_finance.database.storage import create_storage
from thanos_finance.services.advice import create_advice_service
from thanos_finance.services.chat import AdvisorChat
from thanos_finance.services.reports import build_transaction_report
from thanos_finance.utils.datetime_utils import format_date, parse_timestamp
from thanos_finance.utils.logger import setup_logging
from thanos_finance.utils.text_utils import format_brl, format_percent, truncate
from thanos_finance.web.app import run_server

logger = logging.getLogger(__name__)

def _open_store() -> FinanceStore:
    return FinanceStore(create_storage())

def cmd_serve(args: argparse.Namespace) -> int:
    run_server(host=args.host, port=args.port)
    return 0

def cmd_status(args: argparse.Namespace) -> int:
    store = _open_store()
    progress = store.progress
    flags = store.flags
    report = build_transaction_report(store.transactions)

    print(f"🏅 {progress.rank_title} - nível {progress.level}")
    print(f"   XP: {progress.experience} / {progress.next_level_threshold} "
          f"({format_percent(progress.level_progress)})")
    print(f"💎 Joias: {flags.collected_count}/{len(flags.FIELDS)}")
    for stone in STONES:
        mark = stone.icon if getattr(flags, stone.stone_id) else "⚫"
        print(f"   {mark} {stone.title}")
    print(f"💰 Saldo: {format_brl(report.net_result)} "
          f"(renda {format_brl(report.total_income)}, gastos {format_brl(report.total_spent)})")

    latest = store.transactions[:1]
    if latest:
        tx = latest[0]
        print(f"🧾 Última transação: {format_date(parse_timestamp(tx.date))} "
              f"{truncate(tx.description, 40)} {format_brl(tx.amount)}")
    return 0

def cmd_chat(args: argparse.Namespace) -> int:
    store = _open_store()
    advisor = AdvisorChat(store, create_advice_service())

    turn = asyncio.run(advisor.send(args.text))
    if turn is None:
        print("Mensagem vazia.", file=sys.stderr)
        return 1

    print(turn.reply_message.text)
    if turn.transaction:
        tx = turn.transaction
        print(f"✅ Registrado: {tx.description} {format_brl(tx.amount)} ({tx.category})")
    return 0

def cmd_reset_tutorial(args: argparse.Namespace) -> int:
    store = _open_store()
    store.reset_tutorial()
    print("Tutorial reiniciado.")
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="thanos-finance", description="Thanos Finance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=config.server.host, help="Bind host")
    serve.add_argument("--port", type=int, default=config.server.port, help="Bind port")
    serve.set_defaults(handler=cmd_serve)

    status = subparsers.add_parser("status", help="Show level, rank, XP and stones")
    status.set_defaults(handler=cmd_status)

    chat = subparsers.add_parser("chat", help="Ask the advisor once")
    chat.add_argument("text", help="Message for the advisor")
    chat.set_defaults(handler=cmd_chat)

    reset = subparsers.add_parser("reset-tutorial", help="Show the walkthrough again")
    reset.set_defaults(handler=cmd_reset_tutorial)

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        return args.handler(args)
    except KeyboardInterrupt:
        logger.info("⌨️ Interrupted")
        return 130

if __name__ == "__main__":
    sys.exit(main())
