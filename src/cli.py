"""Console entry point for the Forge Deployment Monitor CLI."""

from __future__ import annotations

import argparse
import logging
from typing import List

from clients import ForgeRestClient
from config import MonitorConfig
from errors import ConfigurationError, ForgeError
from log_utils import setup_logging
from models import SiteRef
from monitor import DeploymentMonitor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description=(
            "Trigger a Laravel Forge deployment and wait for it to finish.\n\n"
            "Reads FORGE_API_TOKEN, FORGE_ORGANIZATION, FORGE_SERVER_ID and "
            "FORGE_SITE_ID from the environment."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--timeout",
        type=int,
        metavar="SECONDS",
        help="Maximum time to wait for the deployment (default: 600)",
    )
    parser.add_argument(
        "--poll-interval",
        type=int,
        metavar="SECONDS",
        help="Time between status checks (default: 10)",
    )
    parser.add_argument("--log-file", metavar="PATH", help="Also log to this file")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI main for console_scripts entry point."""
    parser = build_parser()
    args = parser.parse_args(args=argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    logger.info("🔧 Laravel Forge Deployment")
    logger.info("=" * 50)

    try:
        config = MonitorConfig.from_env().apply_args(args)
    except ConfigurationError as e:
        if e.missing:
            logger.error("❌ Missing required environment variables:")
            for name in e.missing:
                logger.error(f"   - {name}")
        for item in e.invalid:
            logger.error(f"❌ Invalid value: {item}")
        return 1
    logger.info("✓ Environment variables validated")

    client = ForgeRestClient(api_token=config.api_token)
    monitor = DeploymentMonitor(
        client=client,
        site=SiteRef(
            organization=config.organization,
            server_id=config.server_id,
            site_id=config.site_id,
        ),
        timeout=config.timeout,
        poll_interval=config.poll_interval,
    )

    try:
        monitor.run()
    except ForgeError as e:
        logger.error("=" * 50)
        logger.error(f"❌ Action failed: {e}")
        return 1

    logger.info("=" * 50)
    logger.info("✅ Action completed successfully")
    return 0
