"""
Command‑line log shipper.

Reads records from a file (or standard input) and pushes them through the
same register / init / flush / exit lifecycle the host pipeline uses, so a
configuration can be tried out locally before deploying the plugin.

Two input formats are supported:

* ``jsonl`` – one JSON object per line (blank lines are ignored),
* ``msgpack`` – a raw Fluent Bit chunk, e.g. captured from a pipeline.

---

# Quick ways to run the script

1. Using a file, with the API key taken from the environment

>>> API_KEY=... cloudant-output-ship logs.jsonl --endpoint acct.cloudant.com \
...     --database logs --auth-mode ENV

2. Piping data

>>> echo '{"msg": "hello"}' | cloudant-output-ship --endpoint localhost:5984 \
...     --database logs

Exit status is ``0`` when every batch was accepted, ``1`` when at least one
batch was rejected and ``2`` when the plugin could not be initialised.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, Iterator, List, Optional

from cloudant_output_lib.constants import (
    ConfigKeys,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    LOG_LEVEL,
    LOG_LEVELS,
    PLUGIN_NAME,
)
from cloudant_output_lib.utils.logger import prepare_logger
from cloudant_output_plugin.plugin import CloudantOutputPlugin, FLB_OK

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_INIT_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ship JSON-lines or Fluent Bit chunks to IBM Cloudant."
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Input file (defaults to STDIN).",
    )
    parser.add_argument(
        "--format",
        choices=["jsonl", "msgpack"],
        default="jsonl",
        help="Input format, default: jsonl.",
    )
    parser.add_argument("--endpoint", required=True, help="Cloudant service URL.")
    parser.add_argument("--database", required=True, help="Target database name.")
    parser.add_argument(
        "--auth-mode",
        default="",
        help="IAMAPIKEY or ENV; omit to send requests unauthenticated.",
    )
    parser.add_argument(
        "--token-path",
        default="",
        help="File with the API key (required with --auth-mode IAMAPIKEY).",
    )
    parser.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT)
    parser.add_argument("--retries", type=int, default=DEFAULT_RETRIES)
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Read every stored document back and log it.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=100,
        help="Number of JSON records per flush, default: 100.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=LOG_LEVEL,
        help="Logging level, default: CLOUDANT_OUTPUT_LOG_LEVEL or INFO.",
    )
    return parser


def plugin_options(args: argparse.Namespace) -> Dict[str, str]:
    return {
        ConfigKeys.ENDPOINT: args.endpoint,
        ConfigKeys.DATABASE: args.database,
        ConfigKeys.AUTHENTICATION_MODE: args.auth_mode,
        ConfigKeys.TOKEN_MOUNT_PATH: args.token_path,
        ConfigKeys.TIMEOUT: str(args.timeout),
        ConfigKeys.RETRIES: str(args.retries),
        ConfigKeys.VERIFY_WRITES: "on" if args.verify else "off",
    }


def read_json_lines(stream, logger: logging.Logger) -> Iterator[Any]:
    for line_no, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("Skipping line %d: invalid JSON: %s", line_no, exc)


def batched(records: Iterator[Any], size: int) -> Iterator[List[Any]]:
    batch = []
    for record in records:
        batch.append(record)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


def _open_input(path: str, binary: bool):
    if path == "-":
        return sys.stdin.buffer if binary else sys.stdin
    if binary:
        return open(path, "rb")
    return open(path, "r", encoding="utf-8")


def ship(plugin: CloudantOutputPlugin, args: argparse.Namespace) -> int:
    """Run the lifecycle over the input named by ``args``; return an exit status."""
    plugin.register()
    if plugin.init(plugin_options(args)) != FLB_OK:
        return EXIT_INIT_FAILED

    status = EXIT_OK
    try:
        if args.format == "msgpack":
            with _open_input(args.input, binary=True) as stream:
                if plugin.flush(stream.read()) != FLB_OK:
                    status = EXIT_REJECTED
        else:
            with _open_input(args.input, binary=False) as stream:
                records = read_json_lines(stream, plugin.logger)
                for batch in batched(records, max(args.batch_size, 1)):
                    if plugin.flush_records(batch) != FLB_OK:
                        status = EXIT_REJECTED
                        break
    finally:
        plugin.exit()
    return status


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = prepare_logger(PLUGIN_NAME, args.log_level)
    return ship(CloudantOutputPlugin(logger=logger), args)


if __name__ == "__main__":
    sys.exit(main())
