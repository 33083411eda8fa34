#!/usr/bin/env python3
"""Dump everything pystarline fetches for one device, once.

Loads the event catalog, fetches the device snapshot and the event
windows, and prints the correlated result plus the raw device JSON, so
new or unparsed payload fields are easy to spot.

Usage
-----
Set environment variables and run::

    export STARLINE_DEVICE_ID="38406090"
    export STARLINE_SLNET_TOKEN="..."
    python scripts/dump_device.py

Options::

    --windows N          Number of 24h windows (default: 3)
    --json               Output as machine-readable JSON
    --output FILE        Write JSON output to FILE
    --skip-events        Only fetch the device snapshot
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pystarline import (  # noqa: E402
    AiohttpFetchClient,
    EventCatalog,
    StarlineConfig,
    StarlineError,
    TelemetryFetcher,
    correlate,
    current_windows,
)
from pystarline.correlator import correlate_latest  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_block(name: str, block: Any, out: list[str]) -> None:
    out.append(f"  {name}:")
    if block is None:
        out.append("    —")
        return
    for key, value in block.model_dump(exclude={"raw"}).items():
        out.append(f"    {key}: {value}")


# ── main ─────────────────────────────────────────────────────


async def dump_device(config: StarlineConfig, *, windows: int, skip_events: bool) -> tuple[list[str], dict[str, Any]]:
    out: list[str] = []
    now = datetime.now().astimezone()
    result: dict[str, Any] = {"timestamp": now.isoformat(), "device_id": config.device_id}

    async with AiohttpFetchClient(timeout=config.request_timeout) as transport:
        fetcher = TelemetryFetcher(config, transport)
        catalog = await EventCatalog.load(fetcher)
        out.append(_section("CATALOG"))
        out.append(f"  status    : {catalog.status}")
        out.append(f"  event types: {len(catalog)}")
        result["catalog"] = {"status": str(catalog.status), "size": len(catalog)}

        device = await fetcher.fetch_snapshot(config.device_id)
        out.append(_section(f"DEVICE  id={config.device_id}"))
        out.append(f"  title     : {device.title}")
        out.append(f"  status    : {device.status}")
        latest = correlate_latest(catalog, device.event)
        out.append(f"  state     : {latest.description if latest else '—'}")
        for name in ("common", "position", "obd", "alarm_state", "state"):
            _format_block(name, getattr(device, name), out)
        for entry in device.balance:
            _format_block(f"balance {entry.key}", entry, out)
        out.append("\n  ── device (raw JSON) ──")
        out.append(json.dumps(device.raw, indent=2, default=str, ensure_ascii=False))
        result["device"] = device.raw

        if skip_events:
            return out, result

        result["windows"] = []
        for window in current_windows(now, windows):
            out.append(_section(f"EVENTS  {window.label}  [{window.start}, {window.end})"))
            try:
                fetched = await fetcher.fetch_events(config.device_id, window)
            except StarlineError as exc:
                out.append(f"  !! events failed: {exc}")
                result["windows"].append({"label": window.label, "error": str(exc)})
                continue
            out.append(f"  status    : {fetched.status}")
            enriched = correlate(catalog, fetched.events)
            for event in enriched:
                when = datetime.fromtimestamp(event.timestamp).isoformat()
                out.append(f"  {when} > {event.description} [{event.severity}]")
            result["windows"].append(
                {
                    "label": window.label,
                    "status": str(fetched.status),
                    "events": [event.model_dump() for event in enriched],
                }
            )

    return out, result


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Dump all data pystarline can fetch for debugging / development.",
    )
    parser.add_argument("--windows", type=int, default=3, help="Number of 24h windows (default: 3)")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write JSON output to FILE")
    parser.add_argument("--skip-events", action="store_true", help="Only fetch the device snapshot")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = StarlineConfig.from_env().validate()
    try:
        out, result = await dump_device(config, windows=args.windows, skip_events=args.skip_events)
    except StarlineError as exc:
        print(f"dump failed: {exc}", file=sys.stderr)
        return 1

    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)
    if args.json_mode and not args.output:
        print(payload)
    elif not args.json_mode:
        print("\n".join(out))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
