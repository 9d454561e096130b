from datetime import date
from typing import Optional


class ReportError(Exception):
    """Base class for every error raised by the weekly report tooling."""


class ConfigurationInvalid(ReportError, ValueError):
    pass


class StoreUnavailable(ReportError):
    """Transport or auth failure while talking to the object store."""


class ObjectNotFound(ReportError):
    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}")
        self.key = key


class NoReportFound(ReportError):
    def __init__(self, message: str, start: Optional[date] = None, end: Optional[date] = None):
        super().__init__(message)
        self.start = start
        self.end = end


class ManagerClosed(ReportError):
    pass
