"""CLI entry point for s3acl."""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path
from xml.etree import ElementTree

import httpx

from s3acl.client import S3Client
from s3acl.config import S3ACLConfig, load_config
from s3acl.errors import S3Error
from s3acl.handlers.acl import (
    CannedACL,
    Owner,
    build_canned_policy,
    policy_from_xml,
    policy_to_xml,
)
from s3acl.logging_config import configure_logging

logger = logging.getLogger("s3acl")

_CANNED_CHOICES = [
    CannedACL.PRIVATE.value,
    CannedACL.PUBLIC_READ.value,
    CannedACL.PUBLIC_READ_WRITE.value,
    CannedACL.AUTHENTICATED_READ.value,
]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        prog="s3acl",
        description="s3acl - read and write ACLs on S3-compatible buckets and objects",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: built-in defaults)",
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        default=None,
        help="Service endpoint URL (overrides config)",
    )
    parser.add_argument(
        "--region",
        type=str,
        default=None,
        help="Signing region (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config, default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        default=None,
        choices=["text", "json"],
        help="Log format: 'text' (human-readable) or 'json' (structured)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    get_obj = sub.add_parser("get-object-acl", help="Show an object's ACL")
    get_obj.add_argument("bucket")
    get_obj.add_argument("key")
    get_obj.add_argument("--raw", action="store_true", help="Print the XML unmodified")

    get_bkt = sub.add_parser("get-bucket-acl", help="Show a bucket's ACL")
    get_bkt.add_argument("bucket")
    get_bkt.add_argument("--raw", action="store_true", help="Print the XML unmodified")

    put_obj = sub.add_parser("put-object-acl", help="Replace an object's ACL")
    put_obj.add_argument("bucket")
    put_obj.add_argument("key")
    _add_acl_source(put_obj)

    put_bkt = sub.add_parser("put-bucket-acl", help="Replace a bucket's ACL")
    put_bkt.add_argument("bucket")
    _add_acl_source(put_bkt)

    return parser.parse_args(argv)


def _add_acl_source(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="AccessControlPolicy XML file")
    source.add_argument("--canned", choices=_CANNED_CHOICES, help="Canned ACL name")
    parser.add_argument(
        "--owner-id",
        default="",
        help="Owner ID used with --canned (default: the current owner)",
    )
    parser.add_argument(
        "--owner-name",
        default="",
        help="Owner display name used with --owner-id",
    )


async def _current_owner(client: S3Client, args: argparse.Namespace) -> Owner:
    """Read the owner from the target's existing ACL."""
    if args.command == "put-object-acl":
        body = await client.objects.get_object_acl_string(args.bucket, args.key)
        return policy_from_xml(body).owner
    policy = await client.buckets.get_bucket_acl(args.bucket)
    return policy.owner


async def _acl_body(client: S3Client, args: argparse.Namespace) -> str:
    """Return the XML to submit, read from --file or built from --canned.

    Canned policies need an owner to grant FULL_CONTROL to. Without
    --owner-id the owner of the current ACL is kept.
    """
    if args.file is not None:
        return args.file.read_text(encoding="utf-8")
    if args.owner_id:
        owner = Owner(id=args.owner_id, display_name=args.owner_name)
    else:
        owner = await _current_owner(client, args)
    return policy_to_xml(build_canned_policy(args.canned, owner))


async def run_command(client: S3Client, args: argparse.Namespace) -> str:
    """Execute one subcommand and return the text to print."""
    if args.command == "get-object-acl":
        if args.raw:
            return await client.objects.get_object_acl_string(args.bucket, args.key)
        info = await client.objects.get_object_acl(args.bucket, args.key)
        return json.dumps(dataclasses.asdict(info), indent=2)

    if args.command == "get-bucket-acl":
        if args.raw:
            return await client.buckets.get_bucket_acl_string(args.bucket)
        policy = await client.buckets.get_bucket_acl(args.bucket)
        return json.dumps(dataclasses.asdict(policy), indent=2)

    if args.command == "put-object-acl":
        body = await _acl_body(client, args)
        await client.objects.put_object_acl_string(args.bucket, args.key, body)
        return ""

    if args.command == "put-bucket-acl":
        body = await _acl_body(client, args)
        await client.buckets.put_bucket_acl_string(args.bucket, body)
        return ""

    raise ValueError(f"Unknown command: {args.command}")


async def _run(config: S3ACLConfig, args: argparse.Namespace) -> str:
    async with S3Client.from_config(config.client) as client:
        return await run_command(client, args)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the s3acl CLI.

    Loads configuration, applies CLI overrides, runs the subcommand and
    prints its output to stdout.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].
    """
    args = parse_args(argv)

    # Use a basic stderr logger for config-loading errors
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    config = S3ACLConfig()
    if args.config is not None:
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            logger.error("Config file not found: %s", args.config)
            sys.exit(1)
        except Exception as exc:
            logger.error("Failed to load config: %s", exc)
            sys.exit(1)

    # Apply CLI overrides
    if args.endpoint is not None:
        config.client.endpoint = args.endpoint
    if args.region is not None:
        config.client.region = args.region
    if args.log_level is not None:
        config.logging.level = args.log_level
    if args.log_format is not None:
        config.logging.format = args.log_format

    # observability.metrics applies to library use; the CLI never calls init_metrics()
    configure_logging(level=config.logging.level, fmt=config.logging.format)

    try:
        output = asyncio.run(_run(config, args))
    except S3Error as exc:
        logger.error("%s", exc)
        sys.exit(1)
    except httpx.HTTPError as exc:
        logger.error("Request failed: %s", exc)
        sys.exit(1)
    except ElementTree.ParseError as exc:
        logger.error("Malformed ACL document: %s", exc)
        sys.exit(1)

    if output:
        print(output)


if __name__ == "__main__":
    main()
