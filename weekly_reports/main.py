import argparse
import sys
from datetime import date
from typing import Optional

from dotenv import load_dotenv

from weekly_reports.config import CONFIG_FILE, load_config, write_sample_config
from weekly_reports.errors import ConfigurationInvalid, ReportError, StoreUnavailable
from weekly_reports.manager import WeeklyReportManager
from weekly_reports.utils.logger import setup_logging

DEFAULT_DOWNLOAD_DIR = "downloads/weekly_reports"


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def _add_common_options(parser: argparse.ArgumentParser, config, directory, log_level) -> None:
    parser.add_argument("--config", default=config, help="properties file with AWS settings")
    parser.add_argument("--dir", default=directory, help="download directory")
    parser.add_argument("--log-level", default=log_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weekly-reports",
        description="Download weekly commission reports from S3 by calendar period.",
    )
    _add_common_options(parser, CONFIG_FILE, DEFAULT_DOWNLOAD_DIR, "INFO")

    # repeated on each command so options may follow the command name;
    # SUPPRESS keeps the top-level values when they are omitted there
    common = argparse.ArgumentParser(add_help=False)
    _add_common_options(common, argparse.SUPPRESS, argparse.SUPPRESS, argparse.SUPPRESS)

    sub = parser.add_subparsers(dest="command", required=True)

    def _command(name: str) -> argparse.ArgumentParser:
        return sub.add_parser(name, parents=[common])

    _command("latest")
    _command("current-week")
    _command("previous-week")
    _command("week").add_argument("start", type=_iso_date)
    _command("last-weeks").add_argument("count", type=int)

    p = _command("month")
    p.add_argument("year", type=int)
    p.add_argument("month", type=int)

    p = _command("quarter")
    p.add_argument("year", type=int)
    p.add_argument("quarter", type=int)

    _command("year").add_argument("year", type=int)

    p = _command("range")
    p.add_argument("start", type=_iso_date)
    p.add_argument("end", type=_iso_date)

    _command("all")
    _command("today-exists")

    p = _command("exists")
    p.add_argument("date", type=_iso_date)
    p.add_argument("--exact", action="store_true", help="require the filename date to parse exactly")

    _command("metadata").add_argument("date", type=_iso_date)
    _command("summary")
    _command("init-config")
    return parser


def run(manager: WeeklyReportManager, args: argparse.Namespace) -> str:
    """Execute one command and return the text to print."""
    cmd = args.command
    target = args.dir

    if cmd == "latest":
        return str(manager.latest_report(target))
    if cmd == "current-week":
        return str(manager.current_week_report(target))
    if cmd == "previous-week":
        return str(manager.previous_week_report(target))
    if cmd == "week":
        return str(manager.specific_week_report(args.start, target))
    if cmd == "today-exists":
        return str(manager.today_report_exists())
    if cmd == "exists":
        if args.exact:
            return str(manager.report_exists_exact(args.date))
        return str(manager.report_exists(args.date))
    if cmd == "metadata":
        meta = manager.report_metadata(args.date)
        if meta is None:
            return f"No report found for {args.date}"
        return f"{meta.key}\t{meta.size_bytes} bytes\tlast modified {meta.last_modified}"
    if cmd == "summary":
        return manager.summary().format()

    if cmd == "last-weeks":
        paths = manager.last_n_weeks_reports(args.count, target)
    elif cmd == "month":
        paths = manager.monthly_reports(args.year, args.month, target)
    elif cmd == "quarter":
        paths = manager.quarterly_reports(args.year, args.quarter, target)
    elif cmd == "year":
        paths = manager.yearly_reports(args.year, target)
    elif cmd == "range":
        paths = manager.reports_in_range(args.start, args.end, target)
    elif cmd == "all":
        paths = manager.all_reports(target)
    else:
        raise ValueError(f"Unknown command: {cmd}")
    return "\n".join(str(p) for p in paths)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_level)
    load_dotenv()

    if args.command == "init-config":
        path = write_sample_config()
        print(path)
        return 0

    try:
        config = load_config(args.config)
        manager = WeeklyReportManager.from_config(config)
    except ConfigurationInvalid as e:
        logger.error("Configuration error: %s", e)
        return 1
    except StoreUnavailable as e:
        logger.error("Could not connect to S3: %s", e)
        return 1

    with manager:
        try:
            output = run(manager, args)
        except (ReportError, ValueError) as e:
            logger.error("%s failed: %s", args.command, e)
            return 1

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
