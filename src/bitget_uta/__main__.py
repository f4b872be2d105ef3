"""
bitget_uta entrypoint
Command-line interface: self-test, ticker lookup, signature debugging
and endpoint listing.
"""
import argparse
import sys
from typing import List, Optional

from .rest.client import UTAClient
from .rest.errors import UTAError
from .rest.signer import build_sign_string, sign
from .selftest import UTASelfTest
from .services.endpoints import REGISTRY
from .shared.config import ConfigError, load_config
from .shared.logging import logging_manager
from .shared.time import format_timestamp_ms


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m bitget_uta",
        description="Bitget Unified Trading Account REST client utilities",
    )
    parser.add_argument('--env-file', help='dotenv file to load instead of .env / config.env')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('selftest', help='3-step connectivity and authentication probe')

    tickers = sub.add_parser('tickers', help='Fetch 24h tickers (unsigned)')
    tickers.add_argument('--category', default='SPOT')
    tickers.add_argument('--symbol')

    signer = sub.add_parser('sign', help='Print the signature input and signature for a request')
    signer.add_argument('method')
    signer.add_argument('path')
    signer.add_argument('--query', default='', help='Encoded query string without "?"')
    signer.add_argument('--body', default=None, help='Raw JSON body')
    signer.add_argument('--timestamp', default=None, help='Epoch ms (defaults to now)')
    signer.add_argument('--secret', default=None, help='Secret key (defaults to BITGET_SECRET_KEY)')

    sub.add_parser('endpoints', help='List registered endpoints')
    return parser


def _cmd_selftest(client: UTAClient) -> int:
    selftest = UTASelfTest(client)
    results = selftest.run_all_tests()

    print()
    print("=" * 60)
    print(" Test Results Summary")
    print("=" * 60)

    for result in results:
        status = "✅" if result.success else "❌"
        print(f"{status} {result.step_name}: {result.endpoint}")

        if not result.success:
            print(f"   HTTP: {result.http_status}, Code: {result.api_code}")
            print(f"   Message: {result.api_msg}")
            print(f"   Hint: {result.error_hint}")

    return 0 if selftest.passed else 1


def _cmd_tickers(client: UTAClient, category: str, symbol: Optional[str]) -> int:
    tickers = client.service("tickers").category(category).symbol(symbol).do()
    for ticker in tickers:
        print(f"{ticker.symbol:<16} last={ticker.last_price:<14} "
              f"bid={ticker.bid1_price:<14} ask={ticker.ask1_price:<14} "
              f"24h={ticker.price_24h_pcnt}")
    if not tickers:
        print("No tickers returned")
    return 0


def _cmd_sign(args: argparse.Namespace) -> int:
    secret = args.secret
    if secret is None:
        secret = load_config(args.env_file).secret_key
    if not secret:
        print("❌ No secret key: pass --secret or set BITGET_SECRET_KEY", file=sys.stderr)
        return 1

    timestamp = args.timestamp or format_timestamp_ms()
    message = build_sign_string(timestamp, args.method, args.path, args.query, args.body)

    print(f"timestamp: {timestamp}")
    print(f"prehash:   {message}")
    print(f"signature: {sign(secret, message)}")
    return 0


def _cmd_endpoints() -> int:
    for name in sorted(REGISTRY):
        spec = REGISTRY[name]
        auth = "signed" if spec.signed else "public"
        required = ", ".join(spec.required) or "-"
        print(f"{name:<24} {spec.method:<5} {spec.path:<44} {auth:<7} required: {required}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entrypoint for bitget_uta"""
    args = _build_parser().parse_args(argv)

    if args.command == 'endpoints':
        return _cmd_endpoints()

    try:
        if args.command == 'sign':
            return _cmd_sign(args)

        config = load_config(args.env_file)
        logging_manager.setup_logging("bitget_uta", level=config.log_level)

        with UTAClient.from_config(config) as client:
            if args.command == 'selftest':
                return _cmd_selftest(client)
            return _cmd_tickers(client, args.category, args.symbol)

    except ConfigError as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        return 1
    except UTAError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
