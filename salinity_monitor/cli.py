"""
Command-line entry point for a single salinity collection run

Exit status is 0 when the run completes, including runs where some
locations failed, and 1 on a fatal error.
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError
from pydantic_settings import SettingsError

from .config import Settings, get_settings
from .exceptions import SalinityMonitorError
from .pipeline.orchestrator import PipelineOrchestrator, RunSummary
from .utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="salinity-monitor",
        description="Estimate soil salinity risk for configured field locations"
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Skip the pause between locations"
    )
    return parser.parse_args(argv)


def run_once(settings: Settings, no_delay: bool = False) -> RunSummary:
    """Build the pipeline from settings and run it once"""
    overrides = {"delay_seconds": 0.0} if no_delay else {}
    orchestrator = PipelineOrchestrator.from_settings(settings, **overrides)
    return orchestrator.run()


def main(argv: Optional[List[str]] = None) -> int:
    """Main function for running a collection pass standalone"""
    args = parse_args(argv)

    try:
        settings = get_settings()
    except (ValidationError, SettingsError) as e:
        setup_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1

    setup_logging(log_level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)

    try:
        summary = run_once(settings, no_delay=args.no_delay)
    except SalinityMonitorError as e:
        logger.bind(error=e.to_dict()).error(f"Fatal error: {e}")
        return 1
    except Exception:
        logger.exception("Unexpected error during salinity collection")
        return 1

    print(
        f"✓ Collection complete: {summary.readings_saved} reading(s) saved, "
        f"{summary.alerts_dispatched} alert(s), {len(summary.locations_skipped)} location(s) skipped"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
