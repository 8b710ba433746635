"""PDRFlow worker: Lambda entry point and local runner."""

import argparse
import asyncio
import logging
from typing import Any

from pdrflow.config import Settings
from pdrflow.events import account_id_from_arn
from pdrflow.utils.logging_setup import bind_request_id, reset_request_id, setup_logging
from handlers.manifest_handler import process_manifest_event


def lambda_handler(event: Any, context: Any) -> str:
    """Invoked once per arrived input manifest; returns the coarse run status."""
    settings = Settings()
    setup_logging(settings)
    account_id = account_id_from_arn(getattr(context, "invoked_function_arn", None))
    token = bind_request_id(getattr(context, "aws_request_id", None))
    try:
        logging.getLogger("pdrflow.worker").info("event received (account_id=%s)", account_id)
        return asyncio.run(process_manifest_event(event, settings=settings, account_id=account_id))
    finally:
        reset_request_id(token)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a disclosure request for a manifest already in storage.")
    parser.add_argument("--bucket", required=True, help="Bucket holding the input manifest")
    parser.add_argument("--key", required=True, help="Key of the input manifest")
    parser.add_argument("--destination-bucket", default=None, help="Override DESTINATION_BUCKET")
    parser.add_argument("--expected-bucket-owner", default=None, help="Account id expected to own the buckets")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    settings = Settings()
    if args.destination_bucket:
        settings.destination_bucket = str(args.destination_bucket)
    setup_logging(settings)

    status = asyncio.run(
        process_manifest_event(
            {"bucket": args.bucket, "key": args.key},
            settings=settings,
            account_id=args.expected_bucket_owner,
        )
    )
    print(status)
    raise SystemExit(0 if status.startswith("200") else 1)


if __name__ == "__main__":
    main()
