#!/usr/bin/env python3
"""
zkaccess Command Line Interface

Usage:
    zkaccess build-request --user <hex> --resource <hex> --proof-a <hex> --proof-b <hex> --proof-c <hex> [--input <hex> ...]
    zkaccess nullifier --request <file>
    zkaccess whitelist {enable,disable,status}
    zkaccess whitelist {add,remove,check} --address <hex>
    zkaccess authorize --address <hex>
"""

import argparse
import json
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from .config import load_settings
from .errors import ZkAccessError

logger = logging.getLogger(__name__)


def load_json(path: str) -> dict:
    """Load JSON from file."""
    with open(path, 'r') as f:
        return json.load(f)


def save_json(data: dict, path: str):
    """Save JSON to file."""
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)


def _hex_arg(name: str, value: str) -> bytes:
    from .types import decode_hex
    return decode_hex(name, value)


@contextmanager
def _open_whitelist(args):
    from .db import Database
    from .storage import SQLiteStorage
    from .whitelist import WhitelistGate

    database = Database(args.db)
    try:
        yield WhitelistGate(
            instance=SQLiteStorage(database, scope="instance"),
            persistent=SQLiteStorage(database, scope="persistent"),
        )
    finally:
        database.close()


def cmd_build_request(args):
    """Assemble an access request from raw hex buffers."""
    from .builder import AccessRequestBuilder
    from .models import AccessRequestModel
    from .types import Address

    request = AccessRequestBuilder().create(
        user=Address.from_hex(args.user),
        resource_id=_hex_arg("resource_id", args.resource),
        proof_a=_hex_arg("proof_a", args.proof_a),
        proof_b=_hex_arg("proof_b", args.proof_b),
        proof_c=_hex_arg("proof_c", args.proof_c),
        public_inputs=[_hex_arg(f"public_inputs[{i}]", pi) for i, pi in enumerate(args.input or [])],
        nonce=args.nonce,
    )
    data = AccessRequestModel.from_request(request).model_dump()

    if args.output:
        save_json(data, args.output)
        print(f"Request saved to: {args.output}")
    else:
        print(json.dumps(data, indent=2))
    return 0


def cmd_nullifier(args):
    """Compute the nullifier of a request file."""
    from .hashing import format_digest, get_hasher
    from .models import AccessRequestModel
    from .nullifier import NullifierDeriver

    request = AccessRequestModel.model_validate(load_json(args.request)).to_request()
    hasher = get_hasher(args.hash)
    nullifier = NullifierDeriver(hasher).for_request(request)

    if args.raw:
        print(nullifier.hex())
    else:
        print(format_digest(nullifier, hasher.name))
    return 0


def cmd_whitelist(args):
    """Administer the whitelist."""
    from .types import Address

    if args.operation in ("add", "remove", "check") and not args.address:
        print(f"✗ --address is required for '{args.operation}'", file=sys.stderr)
        return 2
    address = Address.from_hex(args.address) if args.address else None

    with _open_whitelist(args) as whitelist:
        if args.operation == "enable":
            whitelist.set_enabled(True)
            print("✓ Whitelist enforcement enabled")
            return 0
        if args.operation == "disable":
            whitelist.set_enabled(False)
            print("✓ Whitelist enforcement disabled")
            return 0
        if args.operation == "status":
            print("enabled" if whitelist.is_enabled() else "disabled")
            return 0
        if args.operation == "add":
            whitelist.add(address)
            print(f"✓ Added {address}")
            return 0
        if args.operation == "remove":
            whitelist.remove(address)
            print(f"✓ Removed {address}")
            return 0

        # check
        if whitelist.contains(address):
            print(f"✓ {address} is whitelisted")
            return 0
        print(f"✗ {address} is not whitelisted")
        return 1


def cmd_authorize(args):
    """Whitelist-path decision for an address."""
    from .types import Address

    address = Address.from_hex(args.address)
    with _open_whitelist(args) as whitelist:
        allowed = whitelist.authorize(address)

    if allowed:
        print(f"✓ ALLOWED {address}")
        return 0
    print(f"✗ DENIED {address}: proof required", file=sys.stderr)
    return 1


def build_parser(default_db: Optional[Path] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zkaccess",
        description="Whitelist and zero-knowledge access gate tooling"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # build-request
    build = subparsers.add_parser("build-request", help="Assemble a request from hex buffers")
    build.add_argument("--user", required=True, help="Caller address (hex)")
    build.add_argument("--resource", required=True, help="32-byte resource id (hex)")
    build.add_argument("--proof-a", required=True, help="64-byte G1 point A (hex)")
    build.add_argument("--proof-b", required=True, help="128-byte G2 point B (hex)")
    build.add_argument("--proof-c", required=True, help="64-byte G1 point C (hex)")
    build.add_argument("--input", action="append", help="32-byte public input (hex), repeatable, in circuit order")
    build.add_argument("--nonce", type=int, default=0)
    build.add_argument("--output", "-o", help="Output file")
    build.set_defaults(func=cmd_build_request)

    # nullifier
    null = subparsers.add_parser("nullifier", help="Compute a request's nullifier")
    null.add_argument("--request", required=True, help="Request JSON file")
    null.add_argument("--hash", default=None, help="Hash algorithm (sha3-256, sha256, keccak-256)")
    null.add_argument("--raw", action="store_true", help="Print bare hex")
    null.set_defaults(func=cmd_nullifier)

    # whitelist
    wl = subparsers.add_parser("whitelist", help="Administer the whitelist")
    wl.add_argument("operation", choices=["enable", "disable", "status", "add", "remove", "check"])
    wl.add_argument("--address", help="Address (hex)")
    wl.add_argument("--db", default=default_db, help="SQLite database path")
    wl.set_defaults(func=cmd_whitelist)

    # authorize
    auth = subparsers.add_parser("authorize", help="Whitelist-path authorization check")
    auth.add_argument("--address", required=True, help="Address (hex)")
    auth.add_argument("--db", default=default_db, help="SQLite database path")
    auth.set_defaults(func=cmd_authorize)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    from .logging_config import configure_logging

    settings = load_settings()
    configure_logging(settings.log_level, settings.log_json)

    parser = build_parser(default_db=settings.db_path)
    args = parser.parse_args(argv)
    if getattr(args, "hash", "unset") is None:
        args.hash = settings.hash_algorithm

    try:
        return args.func(args)
    except (ZkAccessError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"✗ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
