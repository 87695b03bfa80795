import argparse
import datetime as dt
import logging
import time

from balikbot.checker import AvailabilityChecker
from balikbot.config import load_settings
from balikbot.dates import ISO_FORMAT
from balikbot.domain import LAST_DATE_KEY
from balikbot.lambda_handler import build_checker, build_store

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def _iso_date(value: str) -> str:
    try:
        dt.datetime.strptime(value, ISO_FORMAT)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from e
    return value


def run_forever(checker: AvailabilityChecker, interval_seconds: int) -> None:
    logger.info("Watcher started. Interval=%ss", interval_seconds)
    while True:
        try:
            logger.info("%s", checker.run())
        except Exception as e:
            # The next round retries naturally.
            logger.error("Check failed (%s: %s)", type(e).__name__, e)
        time.sleep(interval_seconds)


def main() -> int:
    parser = argparse.ArgumentParser(description="BalikBot: bus ticket release watcher")
    parser.add_argument("--once", action="store_true", help="Run single check and exit")
    parser.add_argument(
        "--seed-date",
        type=_iso_date,
        metavar="YYYY-MM-DD",
        help="Store the last released date and exit",
    )
    args = parser.parse_args()

    _setup_logging()

    if args.seed_date:
        store = build_store(load_settings(with_notifier=False))
        store.put(LAST_DATE_KEY, args.seed_date)
        logger.info("Seeded last date %s", args.seed_date)
        return 0

    settings = load_settings()
    checker = build_checker(settings)

    if args.once:
        print(checker.run())
        return 0

    run_forever(checker, settings.check_interval_seconds)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
