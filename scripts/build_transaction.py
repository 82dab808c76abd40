"""
Build an unsigned transaction (or inspect adapter metadata) from the command line.

Usage:
    python scripts/build_transaction.py --chain ethereum --details
    python scripts/build_transaction.py --chain base --list-tokens
    python scripts/build_transaction.py --chain ethereum --action deposit \
        --asset 0x0000206329b97DB379d5E1Bf586BbDB969C63274 --amount 1000000 \
        --receiver 0x...
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adapters.core.cache import FileMetadataCache
from adapters.core.errors import AdapterError
from adapters.protocols import Protocol
from adapters.registry import build_adapter, get_transaction_params
from config.settings import load_settings


def _print_json(obj):
    print(json.dumps(obj, indent=2, default=str))


async def run(args) -> int:
    settings = load_settings()
    cache = None if args.no_cache else FileMetadataCache(settings.cache_dir)

    if args.details or args.list_tokens:
        adapter = build_adapter(args.protocol, args.product, args.chain, cache=cache)
        if args.details:
            _print_json(asdict(adapter.get_protocol_details()))
        if args.list_tokens:
            metadata = await adapter.build_metadata()
            _print_json({address: entry.to_dict() for address, entry in metadata.items()})
        return 0

    missing = [name for name in ('action', 'asset', 'amount', 'receiver') if getattr(args, name) is None]
    if missing:
        print(f"❌ Missing arguments: {', '.join('--' + m for m in missing)}", file=sys.stderr)
        return 2

    tx = await get_transaction_params(
        args.protocol,
        args.product,
        args.chain,
        args.action,
        {'asset': args.asset, 'amount': args.amount, 'receiver': args.receiver},
        cache=cache,
    )
    _print_json(tx)
    return 0


def main():
    parser = argparse.ArgumentParser(description='Build unsigned write-action transaction params')
    parser.add_argument('--protocol', default=Protocol.ANGLE_PROTOCOL.value, help='Protocol id')
    parser.add_argument('--product', default='transmuter', help='Product id')
    parser.add_argument('--chain', required=True, help='Chain name or id (e.g., ethereum, 8453)')
    parser.add_argument('--details', action='store_true', help='Print protocol details')
    parser.add_argument('--list-tokens', action='store_true', help='Print protocol token metadata')
    parser.add_argument('--action', help='Write action (deposit, withdraw)')
    parser.add_argument('--asset', help='Protocol token address')
    parser.add_argument('--amount', help='Raw integer amount')
    parser.add_argument('--receiver', help='Receiver address')
    parser.add_argument('--no-cache', action='store_true', help='Skip the metadata file cache')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        code = asyncio.run(run(args))
    except (AdapterError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == '__main__':
    main()
