from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from weekly_reports.config import AWSConfig
from weekly_reports.errors import ObjectNotFound, StoreUnavailable
from weekly_reports.manager import WeeklyReportManager
from weekly_reports.stores.base import BaseObjectStore, ReportDescriptor

PREFIX = "adv-report/commission/weekly/"


class FakeObjectStore(BaseObjectStore):
    """In-memory store that writes object bodies to the local filesystem."""

    def __init__(self, objects=None):
        self.objects = dict(objects or {})
        self.downloads = []
        self.list_calls = 0
        self.close_calls = 0
        self.unavailable = False
        self.missing_on_download = set()

    def iter_keys(self, prefix):
        self.list_calls += 1
        if self.unavailable:
            raise StoreUnavailable("connection refused")
        for key in sorted(self.objects):
            if key.startswith(prefix):
                yield key

    def get_object(self, key, local_path):
        if key in self.missing_on_download or key not in self.objects:
            raise ObjectNotFound(key)
        path = Path(local_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.objects[key])
        self.downloads.append(key)
        return path

    def head_object(self, key):
        if key not in self.objects:
            raise ObjectNotFound(key)
        return ReportDescriptor(
            key=key,
            size_bytes=len(self.objects[key]),
            last_modified=datetime(2024, 1, 2, tzinfo=timezone.utc),
        )

    def object_exists(self, key):
        if self.unavailable:
            raise StoreUnavailable("connection refused")
        return key in self.objects

    def close(self):
        self.close_calls += 1


def report_key(day: date, ext: str = "csv") -> str:
    return f"{PREFIX}{day.isoformat()}.{ext}"


@pytest.fixture
def aws_config():
    return AWSConfig(
        access_key="AKIATESTKEY",
        secret_key="test-secret-key",
        region="us-east-2",
        bucket="ip-report-prod",
        report_prefix=PREFIX,
    )


@pytest.fixture
def store():
    return FakeObjectStore({
        report_key(date(2024, 1, 1)): b"week-1",
        report_key(date(2024, 1, 8)): b"week-2",
        report_key(date(2024, 1, 15)): b"week-3",
    })


@pytest.fixture
def make_manager():
    def _make(store, today=date(2024, 1, 17)):
        return WeeklyReportManager(store, PREFIX, today=lambda: today)

    return _make
