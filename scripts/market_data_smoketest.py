"""
Smoke test for the market-data tools against the live upstreams.

Runs the tools directly (no server, no OpenAI) and prints a compact summary
of each result: one line per entry, errors included.

Usage:
  python scripts/market_data_smoketest.py
  python scripts/market_data_smoketest.py --stocks TCS INFY --cryptos BTC ETH --currency INR
  python scripts/market_data_smoketest.py --tool get_market_update --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


def _summarize(result) -> list:
    if isinstance(result, dict):
        if "error" in result:
            return [f"  error: {result['error']}"]
        lines = []
        for key, value in result.items():
            lines.append(f"  [{key}]")
            lines.extend("  " + line for line in _summarize(value))
        return lines
    lines = []
    for entry in result or []:
        if "error" in entry and "symbol" in entry:
            lines.append(f"  {entry['symbol']}: ERROR {entry['error']}")
        elif "message" in entry:
            lines.append(f"  {entry['message']}")
        elif "currentPrice" in entry:
            lines.append(
                f"  {entry['canonicalSymbol']}: {entry['currentPrice']:.2f} {entry['currency']} "
                f"({len(entry.get('history') or [])} history points)"
            )
        else:
            lines.append(f"  {entry.get('headline', entry)}")
    return lines


async def _run(args) -> int:
    from market_core.data.factory import create_market_gateway
    from profit_flow.backend.backend_core.config import settings
    from profit_flow.backend.backend_core.tools.market_tools import MarketToolConfig, register_market_tools
    from profit_flow.backend.backend_core.tools.registry import ToolRegistry

    gateway = create_market_gateway(settings.MARKET_DATA_SOURCE, settings.market_data_config())
    registry = ToolRegistry()
    register_market_tools(registry, gateway, MarketToolConfig(default_limit=args.limit))

    calls = {
        "get_stock_price": {"symbols": args.stocks},
        "get_crypto_price": {"symbols": args.cryptos, "currency": args.currency},
        "get_top_stocks": {"limit": args.limit},
        "get_top_cryptos": {"limit": args.limit, "currency": args.currency},
        "get_market_update": {"limit": args.limit},
        "get_crypto_market_update": {"limit": args.limit, "currency": args.currency},
    }
    selected = [args.tool] if args.tool else list(calls)

    failures = 0
    for name in selected:
        try:
            result = await registry.execute_tool(name, json.dumps(calls[name]))
        except Exception as e:
            failures += 1
            print(f"FAIL: {name} raised {type(e).__name__}: {e}", file=sys.stderr)
            continue
        print(f"{name}:")
        if args.json:
            print(json.dumps(result, indent=2, default=str))
        else:
            print("\n".join(_summarize(result)))

    await gateway.aclose()
    if failures:
        return 2
    print("PASS: market data smoketest")
    return 0


def main() -> int:
    _ensure_repo_on_path()

    parser = argparse.ArgumentParser(description="Run market-data tools against live upstreams")
    parser.add_argument("--stocks", nargs="+", default=["TCS", "RELIANCE"])
    parser.add_argument("--cryptos", nargs="+", default=["BTC", "ETH"])
    parser.add_argument("--currency", default="USD", choices=["USD", "INR"])
    parser.add_argument("--limit", type=int, default=2)
    parser.add_argument("--tool", default=None, help="Run only this tool")
    parser.add_argument("--json", action="store_true", help="Print full JSON results")
    args = parser.parse_args()

    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
