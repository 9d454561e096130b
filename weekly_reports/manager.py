"""Calendar-oriented retrieval of weekly reports from the object store.

The manager owns a single store connection. Every call re-lists the report
prefix, resolves the keys it needs and downloads them into a caller-supplied
directory as ``<directory>/<filename>``.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Union

from weekly_reports import periods, resolver
from weekly_reports.config import AWSConfig
from weekly_reports.errors import ManagerClosed, NoReportFound, StoreUnavailable
from weekly_reports.periods import DateRange
from weekly_reports.stores.base import BaseObjectStore, ReportDescriptor
from weekly_reports.stores.s3 import S3ObjectStore

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_MAX_DAYS_OLD = 7


@dataclass(frozen=True)
class DownloadedReport:
    source_key: str
    local_path: Path


@dataclass(frozen=True)
class ReportsSummary:
    """Bucket overview. ``total_reports`` counts every listed object under the
    prefix, dated or not; folder marker keys ending in ``/`` are never listed.
    """

    total_reports: int
    latest_date: Optional[date]
    days_since_latest: Optional[int]
    up_to_date: bool

    def format(self) -> str:
        if self.total_reports == 0:
            return "No weekly reports found in S3 bucket"
        lines = [
            "Reports Summary:",
            f"- Total reports available: {self.total_reports}",
            f"- Latest report date: {self.latest_date or 'Unknown'}",
            f"- Days since latest report: "
            f"{self.days_since_latest if self.days_since_latest is not None else 'Unknown'}",
            f"- Reports up to date: {self.up_to_date}",
        ]
        return "\n".join(lines)


class WeeklyReportManager:
    def __init__(
        self,
        store: BaseObjectStore,
        report_prefix: str,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.report_prefix = report_prefix
        self._today = today
        self._closed = False

    @classmethod
    def from_config(cls, config: AWSConfig, today: Callable[[], date] = date.today) -> "WeeklyReportManager":
        """Validate ``config`` and open an S3 connection for it."""
        config.validate()
        store = S3ObjectStore(
            bucket=config.bucket,
            region=config.region,
            access_key=config.access_key,
            secret_key=config.secret_key,
        )
        return cls(store, config.report_prefix, today=today)

    def __enter__(self) -> "WeeklyReportManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.store.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ManagerClosed("WeeklyReportManager is closed")

    def _list_keys(self) -> list[str]:
        self._ensure_open()
        return self.store.list_keys(self.report_prefix)

    def _download(self, key: str, directory: Path) -> DownloadedReport:
        local_path = self.store.get_object(key, directory / resolver.filename_of(key))
        return DownloadedReport(source_key=key, local_path=Path(local_path))

    # -- downloads by range ------------------------------------------------

    def download_range(self, date_range: DateRange, download_directory: PathLike) -> list[DownloadedReport]:
        """Download every report dated inside ``date_range``, in listing order.

        Stops at the first failed download; reports already written stay on disk.
        """
        self._ensure_open()
        directory = Path(download_directory)
        directory.mkdir(parents=True, exist_ok=True)

        keys = resolver.filter_by_range(self._list_keys(), date_range)
        downloaded = [self._download(key, directory) for key in keys]

        logger.info(
            "Downloaded %d reports for date range %s to %s",
            len(downloaded), date_range.start, date_range.end,
        )
        return downloaded

    def reports_in_range(self, start: date, end: date, download_directory: PathLike) -> list[Path]:
        return self._paths(DateRange(start, end), download_directory)

    def _paths(self, date_range: DateRange, download_directory: PathLike) -> list[Path]:
        return [report.local_path for report in self.download_range(date_range, download_directory)]

    def _single_report(self, date_range: DateRange, download_directory: PathLike) -> Path:
        self._ensure_open()
        directory = Path(download_directory)
        directory.mkdir(parents=True, exist_ok=True)

        keys = resolver.filter_by_range(self._list_keys(), date_range)
        if not keys:
            raise NoReportFound(
                f"No reports found for {date_range.start} to {date_range.end}",
                start=date_range.start,
                end=date_range.end,
            )
        return self._download(keys[0], directory).local_path

    # -- single weekly reports ---------------------------------------------

    def current_week_report(self, download_directory: PathLike) -> Path:
        date_range = periods.current_week(self._today())
        logger.info("Fetching current week report (%s to %s)", date_range.start, date_range.end)
        return self._single_report(date_range, download_directory)

    def previous_week_report(self, download_directory: PathLike) -> Path:
        date_range = periods.previous_week(self._today())
        logger.info("Fetching previous week report (%s to %s)", date_range.start, date_range.end)
        return self._single_report(date_range, download_directory)

    def specific_week_report(self, week_start: date, download_directory: PathLike) -> Path:
        date_range = periods.specific_week(week_start)
        logger.info("Fetching specific week report (%s to %s)", date_range.start, date_range.end)
        return self._single_report(date_range, download_directory)

    def latest_report(self, download_directory: PathLike) -> Path:
        """Download the report with the most recent date in its filename."""
        self._ensure_open()
        directory = Path(download_directory)
        directory.mkdir(parents=True, exist_ok=True)

        key = resolver.latest(self._list_keys())
        if key is None:
            raise NoReportFound("No weekly reports found in S3 bucket")

        path = self._download(key, directory).local_path
        logger.info("Downloaded latest weekly report: %s", path)
        return path

    # -- report collections ------------------------------------------------

    def last_n_weeks_reports(self, number_of_weeks: int, download_directory: PathLike) -> list[Path]:
        date_range = periods.last_n_weeks(number_of_weeks, self._today())
        logger.info(
            "Fetching last %d weeks reports (%s to %s)",
            number_of_weeks, date_range.start, date_range.end,
        )
        return self._paths(date_range, download_directory)

    def monthly_reports(self, year: int, month: int, download_directory: PathLike) -> list[Path]:
        date_range = periods.month(year, month)
        logger.info("Fetching monthly reports for %d-%02d", year, month)
        return self._paths(date_range, download_directory)

    def quarterly_reports(self, year: int, quarter: int, download_directory: PathLike) -> list[Path]:
        date_range = periods.quarter(year, quarter)
        logger.info(
            "Fetching quarterly reports for Q%d %d (%s to %s)",
            quarter, year, date_range.start, date_range.end,
        )
        return self._paths(date_range, download_directory)

    def yearly_reports(self, year: int, download_directory: PathLike) -> list[Path]:
        logger.info("Fetching yearly reports for %d", year)
        return self._paths(periods.year(year), download_directory)

    def current_month_reports(self, download_directory: PathLike) -> list[Path]:
        return self._paths(periods.current_month(self._today()), download_directory)

    def previous_month_reports(self, download_directory: PathLike) -> list[Path]:
        return self._paths(periods.previous_month(self._today()), download_directory)

    def current_quarter_reports(self, download_directory: PathLike) -> list[Path]:
        return self._paths(periods.current_quarter(self._today()), download_directory)

    def current_year_reports(self, download_directory: PathLike) -> list[Path]:
        return self._paths(periods.current_year(self._today()), download_directory)

    def all_reports(self, download_directory: PathLike) -> list[Path]:
        """Download every report whose filename carries a parseable date."""
        paths = self._paths(periods.all_time(), download_directory)
        logger.info("Downloaded all %d weekly reports to %s", len(paths), download_directory)
        return paths

    # -- existence and metadata --------------------------------------------

    def report_exists(self, day: date) -> bool:
        """True if any report filename contains ``day`` as ``YYYY-MM-DD``.

        Substring match: ``2024-01-01-extra.csv`` counts as a report for
        2024-01-01. Use ``report_exists_exact`` to require a parsed date.
        """
        exists = any(resolver.matches_date(key, day) for key in self._list_keys())
        logger.info("Weekly report exists for %s: %s", day, exists)
        return exists

    def report_exists_exact(self, day: date) -> bool:
        exists = any(resolver.matches_date_exact(key, day) for key in self._list_keys())
        logger.info("Weekly report exists (exact) for %s: %s", day, exists)
        return exists

    def today_report_exists(self) -> bool:
        return self.report_exists(self._today())

    def report_metadata(self, day: date) -> Optional[ReportDescriptor]:
        """Metadata for the first listed report whose filename contains ``day``."""
        key = next((k for k in self._list_keys() if resolver.matches_date(k, day)), None)
        if key is None:
            logger.warning("No report found for date: %s", day)
            return None
        return self.store.head_object(key)

    def report_key_exists(self, key: str) -> bool:
        """Existence of a raw key; store outages are logged and reported as False."""
        self._ensure_open()
        try:
            return self.store.object_exists(key)
        except StoreUnavailable as e:
            logger.error("Error checking if report exists %s: %s", key, e)
            return False

    # -- freshness ---------------------------------------------------------

    def latest_report_date(self) -> Optional[date]:
        key = resolver.latest(self._list_keys())
        return resolver.extract_date(key) if key else None

    def days_since_latest_report(self) -> Optional[int]:
        latest_date = self.latest_report_date()
        if latest_date is None:
            return None
        return (self._today() - latest_date).days

    def reports_up_to_date(self, max_days_old: int = DEFAULT_MAX_DAYS_OLD) -> bool:
        days = self.days_since_latest_report()
        return days is not None and days <= max_days_old

    def summary(self, max_days_old: int = DEFAULT_MAX_DAYS_OLD) -> ReportsSummary:
        keys = self._list_keys()
        latest_key = resolver.latest(keys)
        latest_date = resolver.extract_date(latest_key) if latest_key else None
        days = (self._today() - latest_date).days if latest_date else None
        return ReportsSummary(
            total_reports=len(keys),
            latest_date=latest_date,
            days_since_latest=days,
            up_to_date=days is not None and days <= max_days_old,
        )
