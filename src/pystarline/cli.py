"""Command line entry point: ``pystarline --device-id ID --token TOKEN``."""

from __future__ import annotations

import argparse
import logging
import sys

from pystarline._redact import mask_secret
from pystarline.config import StarlineConfig
from pystarline.dashboard import Dashboard
from pystarline.exceptions import StarlineConfigError
from pystarline.poller import PollerThread
from pystarline.publisher import SnapshotQueue

_logger = logging.getLogger("pystarline")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pystarline",
        description="Live terminal dashboard for a StarLine telematics device.",
    )
    parser.add_argument("--device-id", help="StarLine device id (env: STARLINE_DEVICE_ID)")
    parser.add_argument("--token", help="slnet session token (env: STARLINE_SLNET_TOKEN)")
    parser.add_argument("--windows", type=int, help="Number of 24h event windows, today included (default: 3)")
    parser.add_argument(
        "--refetch-history",
        action="store_true",
        default=None,
        help="Re-fetch historical windows after midnight",
    )
    parser.add_argument("--log-file", default="pystarline.log", help="Log file (default: pystarline.log)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(log_file: str, verbose: bool) -> None:
    # The dashboard owns the terminal, so logs go to a file.
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.verbose)

    try:
        config = StarlineConfig.from_env(
            device_id=args.device_id,
            slnet_token=args.token,
            window_count=args.windows,
            refetch_history_on_rollover=args.refetch_history,
        ).validate()
    except StarlineConfigError as exc:
        print(f"pystarline: {exc}", file=sys.stderr)
        return 2

    _logger.info(
        "pystarline starting up: device id %s, token %s",
        config.device_id,
        mask_secret(config.slnet_token),
    )

    snapshots = SnapshotQueue()
    poller = PollerThread(config, snapshots)
    poller.start()
    try:
        stopped = Dashboard(snapshots).run()
    except KeyboardInterrupt:
        _logger.info("Interrupted by user")
        stopped = None
    finally:
        poller.stop()
        poller.join(timeout=5.0)

    if stopped is not None and stopped.error is not None:
        print(f"pystarline: {stopped.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
