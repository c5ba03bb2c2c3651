"""
Resolve a shop entitlement from the command line.

Prints the decision and the route the mobile client would push, as JSON.
Reads the credential from --token or SHOPNET_TOKEN; with neither, resolves as
an anonymous caller.
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Optional, Sequence

from shopnet.core.config import settings
from shopnet.core.logging import configure_logging
from shopnet.features.entitlements.service import resolve_entitlement
from shopnet.features.shops.client import ShopApiClient
from shopnet.features.shops.presentation import route_for_decision


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve which shop screen a credential leads to.")
    parser.add_argument("--token", dest="token", default=os.getenv("SHOPNET_TOKEN"), help="Bearer credential.")
    parser.add_argument("--api-base", dest="api_base", default=settings.SHOPNET_API_BASE, help="Shop backend base URL.")
    parser.add_argument("--timeout", dest="timeout", type=float, default=settings.SHOP_API_TIMEOUT_SECONDS)
    args = parser.parse_args(argv)

    configure_logging(settings.ENV, stream=sys.stderr)

    with ShopApiClient(base_url=args.api_base, timeout=args.timeout) as client:
        decision = resolve_entitlement(args.token, client=client)

    result = decision.to_dict()
    result["route"] = route_for_decision(decision).model_dump()
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
