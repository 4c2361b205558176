from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from config.settings import Settings
from ops.structured_logger import setup_logging
from verification.client import CheckHimClient
from verification.errors import APIError, CheckHimError
from verification.options import ClientConfig

EXIT_OK = 0
EXIT_API_ERROR = 1
EXIT_FAILURE = 2
EXIT_CONFIG = 3


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="checkhim-verify", description="Verify a phone number with CheckHim")
    parser.add_argument("number", help="Phone number in international format, e.g. +5511984339000")
    parser.add_argument("--api-key", default=None, help="API key (defaults to CHECKHIM_API_KEY)")
    parser.add_argument("--base-url", default=None, help="Service base URL (defaults to CHECKHIM_BASE_URL)")
    parser.add_argument("--timeout", type=float, default=None, help="Transport timeout in seconds")
    parser.add_argument("--deadline", type=float, default=None, help="Give up after this many seconds")
    parser.add_argument("--log-level", default=None, help="Log level (defaults to LOG_LEVEL)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    args = parse_args(argv)
    s = settings or Settings()
    setup_logging(args.log_level or s.LOG_LEVEL, stream=sys.stderr, service="checkhim-cli")

    api_key = args.api_key or s.CHECKHIM_API_KEY
    if not api_key:
        print(json.dumps({"error_type": "ConfigError", "message": "CHECKHIM_API_KEY not configured"}), file=sys.stderr)
        return EXIT_CONFIG

    config = ClientConfig(
        base_url=args.base_url or s.CHECKHIM_BASE_URL,
        timeout=args.timeout or s.CHECKHIM_TIMEOUT_SECONDS,
    )
    with CheckHimClient(api_key, config) as client:
        try:
            resp = client.verify(args.number, timeout=args.deadline)
        except APIError as e:
            print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
            return EXIT_API_ERROR
        except CheckHimError as e:
            print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
            return EXIT_FAILURE

    print(json.dumps(resp.model_dump(), ensure_ascii=False))
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
