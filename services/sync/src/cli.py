"""CLI entrypoint for sync service"""
import argparse
import json
import logging
import sys

from shared.utils.config import get_settings

from .errors import ValidationError
from .scheduled import ALL_JURISDICTIONS, ScheduledSync
from .sync import SyncService

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sync Open States bills into the record store"
    )
    parser.add_argument(
        "--state",
        dest="states",
        action="append",
        default=[],
        metavar="CODE",
        help="State code to sync (e.g., ca); repeat for several states",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        default=False,
        help=f"Run the scheduled sync over all {len(ALL_JURISDICTIONS)} jurisdictions in batches",
    )
    parser.add_argument(
        "--limit",
        type=positive_int,
        default=None,
        metavar="N",
        help="Maximum bills per state (default: 50, or 100 with --all)",
    )
    parser.add_argument(
        "--incremental",
        action="store_true",
        default=False,
        help="Only sync bills updated since each state's last recorded watermark",
    )
    return parser


def main(argv=None):
    """Main entry point for sync service."""
    args = build_parser().parse_args(argv)

    # Setup logging
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        service = SyncService(settings=settings)
        if args.all:
            summary = ScheduledSync(service, limit=args.limit).run()
        else:
            summary = service.sync_states(
                args.states,
                limit=args.limit,
                incremental=args.incremental,
            )
        print(json.dumps(summary.model_dump(by_alias=True, exclude_none=True), indent=2))
        sys.exit(0)
    except ValidationError as e:
        logger.error(f"{e} (use --state CODE or --all)")
        sys.exit(2)
    except Exception as e:
        logger.error(f"Sync failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
