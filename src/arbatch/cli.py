#!/usr/bin/env python3

import argparse
import logging
import sys
import os
import json

from .cache import SQLiteUploadCache
from .config import load_config
from .assets import discover_assets
from .network import ArweaveClient
from .signer import ArweaveSigner
from .uploader import make_bundle_upload_generator


def setup_logging(debug: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if debug else logging.INFO

    filename = "arbatch_debug.log" if debug else None

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        filename=filename,
        filemode='w'
    )

    if debug:
        print(f"Debug logging enabled. Writing to {filename}...")


# ---------------------------------------------------------------------------

def cmd_upload(args) -> int:
    """Handle upload command."""
    config = load_config(args.config)
    setup_logging(args.debug)

    if args.limit_bytes is not None:
        config.bundle.size_byte_limit = args.limit_bytes

    if not os.path.isdir(args.dir):
        print(f"Error: Directory '{args.dir}' not found")
        return 1

    cache = SQLiteUploadCache(args.cache or config.cache.db_path)
    try:
        assets = discover_assets(args.dir, config.bundle.image_extension)
        pending = cache.pending_assets(assets)
        print(
            f"Found {len(assets)} asset(s), {len(assets) - len(pending)} already "
            f"uploaded, {len(pending)} to upload"
        )
        if not pending:
            return 0

        signer = ArweaveSigner.load(args.wallet)
        uploaded = 0
        with ArweaveClient(config.network) as client:
            uploader = make_bundle_upload_generator(
                args.dir, pending, signer, client, config
            )
            for result in uploader:
                # Persist right away: nothing re-uploads a bundle after a crash.
                cache.save_bundle_result(result)
                uploaded += len(result)
                if len(result):
                    print(
                        f"Bundle {uploader.bundles_uploaded}: {len(result)} asset(s) "
                        f"uploaded ({uploaded}/{len(pending)})"
                    )

        print("Upload completed successfully!")
        return 0

    except Exception as e:
        print(f"Error: {e}")
        return 1
    finally:
        cache.close()


def cmd_status(args) -> int:
    """Handle status command."""
    config = load_config(args.config)
    setup_logging(args.debug)

    try:
        cache = SQLiteUploadCache(args.cache or config.cache.db_path)
        try:
            items = cache.list_items()
        finally:
            cache.close()

        if args.json:
            print(json.dumps(items, indent=2, default=str))
            return 0

        if not items:
            print("No uploaded assets found")
            return 0

        print(f"Found {len(items)} uploaded asset(s):\n")
        for item in items:
            print(f"Key: {item['key']}")
            print(f"  Name: {item.get('name') or 'N/A'}")
            print(f"  Link: {item['link']}")
            print(f"  Uploaded: {item.get('uploaded_at', 'N/A')}")
        return 0

    except Exception as e:
        print(f"Error: {e}")
        return 1


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="arbatch: bundled asset uploads to Arweave",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Upload every image + manifest pair from ./assets
  arbatch upload ./assets --wallet wallet.json

  # Smaller bundles, custom cache
  arbatch upload ./assets --wallet wallet.json --limit-bytes 50000000 --cache drop1.db

  # Show what has been uploaded so far
  arbatch status --cache drop1.db --json
""",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Configuration file path",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    upload_parser = subparsers.add_parser("upload", help="Upload asset file pairs")
    upload_parser.add_argument("dir", help="Directory holding <key>.png + <key>.json pairs")
    upload_parser.add_argument(
        "--wallet",
        required=True,
        help="Arweave JWK wallet file",
    )
    upload_parser.add_argument(
        "--cache",
        type=str,
        help="Upload cache database (default: from config)",
    )
    upload_parser.add_argument(
        "--limit-bytes",
        type=int,
        help="Bundle size limit in bytes (default: 200000000)",
    )

    status_parser = subparsers.add_parser("status", help="Show uploaded assets")
    status_parser.add_argument(
        "--cache",
        type=str,
        help="Upload cache database (default: from config)",
    )
    status_parser.add_argument(
        "--json",
        action="store_true",
        help="Output status in JSON format",
    )

    args = parser.parse_args(argv)

    if args.command == "upload":
        return cmd_upload(args)
    elif args.command == "status":
        return cmd_status(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
