#!/usr/bin/env python3
"""
CLI entry point for the sync trigger.

Polls one API operation and writes new records and snapshots to the
configured sink.

Usage:
    sync-trigger --config config/trigger.yaml --once
    sync-trigger --config config/trigger.yaml --max-cycles 10 --interval 30
    sync-trigger --config config/trigger.yaml --show-snapshot
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import TriggerConfig
from .connectors import HttpConnector
from .core.exceptions import TriggerConfigError, TriggerError
from .core.logging import configure_logging
from .core.models import IncomingMessage
from .core.sink import EventSink
from .openapi import ApiSpec
from .runner import PollingRunner, RunnerConfig, TriggerProcessor
from .sinks import JsonLinesSink, LoggingSink
from .state import create_snapshot_store


logger = logging.getLogger("sync_trigger.cli")


def build_sink(config: TriggerConfig) -> EventSink:
    """Build the event sink from configuration."""
    output = config.get_output_config()
    sink_type = (output.get("type") or "jsonl").lower()

    if sink_type == "jsonl":
        return JsonLinesSink(Path(output.get("path") or "out/events.jsonl"))
    if sink_type == "log":
        return LoggingSink()

    raise TriggerError(f"Unknown output type: {sink_type}. Supported: 'jsonl', 'log'")


def build_processor(config: TriggerConfig) -> TriggerProcessor:
    """Build the trigger processor (API document + HTTP connector) from configuration."""
    api_settings = config.get_api_settings()
    settings = config.get_trigger_settings()

    if not api_settings.spec_path:
        raise TriggerError("api.spec_path is not configured")

    api_spec = ApiSpec.from_file(Path(api_settings.spec_path))
    connector = HttpConnector(
        name=settings.operation_id or "http",
        rate_limit_delay=api_settings.rate_limit_delay,
        timeout=api_settings.timeout,
        max_retries=api_settings.max_retries,
        default_headers=api_settings.headers,
    )
    return TriggerProcessor(api_spec, connector, settings, api_settings)


def load_message(path: Optional[str]) -> IncomingMessage:
    """
    Load the inbound message from a JSON file, or return an empty message.

    Raises:
        TriggerConfigError: If the file cannot be read or is not a JSON object
    """
    if not path:
        return IncomingMessage()
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise TriggerConfigError(f"Cannot load message file {path}: {e}") from e
    if not isinstance(raw, dict):
        raise TriggerConfigError(f"Message file {path} must hold a JSON object")
    return IncomingMessage.from_dict(raw)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Poll a REST API operation and emit records newer than the stored snapshot"
    )
    parser.add_argument("--config", type=Path, help="Path to YAML configuration file")
    parser.add_argument("--message", help="JSON file holding the inbound message")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--max-cycles", type=int, help="Stop after this many cycles")
    parser.add_argument("--interval", type=float, help="Seconds between cycles")
    parser.add_argument("--show-snapshot", action="store_true",
                        help="Print the stored snapshot and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--structured-logs", action="store_true", help="Log JSON lines")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = parse_args(argv)

    try:
        config = TriggerConfig(args.config)
        message = load_message(args.message)
    except TriggerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    settings = config.get_trigger_settings()
    verbose = args.verbose or settings.verbose
    configure_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        structured=args.structured_logs,
    )
    logger.info(f"Config {json.dumps(config.redacted(), default=str)}")

    state_config = config.get_state_config()
    store = create_snapshot_store(state_config.get("type"), state_config.get("path"))
    trigger_key = settings.operation_id or "default"

    if args.show_snapshot:
        print(json.dumps(store.load(trigger_key).to_dict(), indent=2, default=str))
        store.close()
        return 0

    runner_config = config.get_runner_config()
    max_cycles = args.max_cycles if args.max_cycles is not None else runner_config.get("max_cycles")
    if args.once:
        max_cycles = 1
    interval = args.interval if args.interval is not None else runner_config.get("interval_seconds", 60.0)

    try:
        processor = build_processor(config)
        sink = build_sink(config)
    except TriggerError as e:
        logger.error(f"Cannot start trigger: {e}")
        store.close()
        return 2

    runner = PollingRunner(
        processor=processor,
        store=store,
        sink=sink,
        config=RunnerConfig(interval_seconds=float(interval), max_cycles=max_cycles),
        message=message,
        trigger_key=trigger_key,
    )

    try:
        cycles = asyncio.run(runner.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")
        return 130
    finally:
        runner.close()

    return 1 if any(m.status == "failed" for m in cycles) else 0


if __name__ == "__main__":
    sys.exit(main())
