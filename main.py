"""
CarouWatch - Carousell Listing Monitor
Main entry point: fetch listings once, or poll and send new ones to Slack.
"""

import sys
import signal
import logging
import argparse

import config
from models import shorten_listings
from notifier import SlackNotifier
from poller import Poller
from scrapers import BaseScraper, CarousellScraper, FetchError, ScraperError, SearchRequest

logger = logging.getLogger("CarouWatch")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, log_file=config.LOG_FILE):
    """
    Configure root logging.

    Args:
        verbose: Log at INFO instead of WARNING
        log_file: Optional path of a log file, in addition to stderr
    """
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return number


def build_request(args) -> SearchRequest:
    return SearchRequest(
        args.search_terms,
        price_floor=args.price_floor,
        price_ceil=args.price_ceil,
        recent=args.recent,
    )


def create_scraper(args) -> BaseScraper:
    """Pick the transport. The browser scraper pulls in Playwright, so import it only when asked."""
    if args.browser:
        from scrapers.browser import BrowserScraper
        return BrowserScraper()
    return CarousellScraper()


def cmd_get(args) -> int:
    """Fetch one page of listings and print them."""
    request = build_request(args)
    request.validate()

    with create_scraper(args) as scraper:
        listings = scraper.get_listings(request)

    if args.shorthand:
        for summary in shorten_listings(listings):
            print(summary)
        return 0

    print("Obtained", len(listings), "listings")
    for listing in listings:
        print(listing)
    return 0


def install_signal_handlers(poller: Poller):
    """First Ctrl+C stops the poller after its current step, the second exits."""

    def signal_handler(signum, frame):
        if not poller.running:
            logger.info("Force exit...")
            sys.exit(1)
        logger.info("Shutdown signal received, stopping... (press Ctrl+C again to force)")
        poller.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def cmd_notify(args) -> int:
    """Poll Carousell and post new listings to Slack until stopped."""
    request = build_request(args)
    request.validate()

    notifier = SlackNotifier(config.SLACK_ACCESS_TOKEN, args.slack_channel)

    print(
        "\n***\n"
        "Setting up slack notifications with parameters:\n"
        f"Search Terms: {request.search_term}\n"
        f"Interval: {args.interval}\n"
        f"Slack Channel: {args.slack_channel}\n"
        "***\n"
    )

    if not notifier.test_token():
        logger.warning("Slack token test failed - notifications may not work")

    scraper = create_scraper(args)
    poller = Poller(scraper, request, notifier.notify, interval_minutes=args.interval)
    install_signal_handlers(poller)

    notifier.send_startup_message(request, args.interval)
    logger.info(f"Monitoring started. {request.describe()} | interval {args.interval} min")

    try:
        poller.run()
    except FetchError as e:
        notifier.send_error_message(f"CarouWatch stopped: {e}")
        raise
    finally:
        scraper.close()
        notifier.close()

    logger.info("CarouWatch stopped")
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("search_terms", nargs="+", metavar="TERM", help="Carousell search terms")
    common.add_argument(
        "-r", "--recent",
        action="store_true",
        default=config.RECENT_ONLY,
        help="Search recent listings",
    )
    common.add_argument(
        "-f", "--price-floor",
        type=non_negative_int,
        default=config.MIN_PRICE,
        help="Minimum price of listing",
    )
    common.add_argument(
        "-c", "--price-ceil",
        type=non_negative_int,
        default=config.MAX_PRICE,
        help="Maximum price of listing",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Enable verbose mode with logging")
    common.add_argument(
        "--browser",
        action="store_true",
        help="Fetch pages with a headless browser instead of plain HTTP",
    )

    parser = argparse.ArgumentParser(
        description="CarouWatch - fetches Carousell listings and notifies about new ones on Slack",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", parents=[common], help="Fetch Carousell listings")
    get_parser.add_argument(
        "-s", "--shorthand",
        action="store_true",
        help="Display listings output in summarized form",
    )
    get_parser.set_defaults(func=cmd_get)

    notify_parser = subparsers.add_parser(
        "notify",
        parents=[common],
        help="Notify on new Carousell listings (requires SLACK_ACCESS_TOKEN)",
    )
    notify_parser.add_argument(
        "--slack-channel",
        default=config.SLACK_CHANNEL,
        required=not config.SLACK_CHANNEL,
        help="Slack channel id to send notifications, e.g. C0341H4MD1P",
    )
    notify_parser.add_argument(
        "-i", "--interval",
        type=positive_int,
        default=config.CHECK_INTERVAL_MINUTES,
        help="Interval in minutes",
    )
    notify_parser.set_defaults(func=cmd_notify)

    return parser


def main(argv=None) -> int:
    """Entry point with argument parsing."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        return args.func(args)
    except ScraperError as e:
        logger.error(f"{args.command} failed: {e}", exc_info=args.verbose)
        print("Something unexpected happened")
        return 1


if __name__ == "__main__":
    sys.exit(main())
