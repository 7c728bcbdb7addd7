"""
Reading and alert sinks

Reading persistence and alert dispatch are independent side effects with no
transaction between them. Each sink raises its own error type so the
pipeline can log one failure without undoing the other.

File sinks buffer records for the run and write them in a single batch on
flush(). Backend sinks post each record as it is submitted.
"""

from typing import Any, Dict, List, Optional, Type
import requests

from ..exceptions import AlertDispatchError, ConfigurationError, PersistenceError, SalinityMonitorError
from ..models.readings import Alert, EnvironmentalReading
from ..utils.http import create_session
from ..utils.logger import get_logger
from .history_store import BoundedJsonStore

logger = get_logger(__name__)


class FileSink:
    """Buffers records and appends them to a bounded JSON store on flush"""

    error_class: Type[SalinityMonitorError] = PersistenceError

    def __init__(self, store: BoundedJsonStore):
        self.store = store
        self.pending: List[Any] = []
        self.total_persisted: Optional[int] = None

    def submit(self, record: Any) -> None:
        self.pending.append(record)

    def flush(self) -> int:
        """
        Write buffered records in one batch

        Returns:
            Number of records written by this flush

        Raises:
            PersistenceError or AlertDispatchError (per sink) if the write fails
        """
        if not self.pending:
            return 0

        batch, self.pending = self.pending, []
        try:
            self.total_persisted = self.store.append(batch)
        except PersistenceError as e:
            if self.error_class is PersistenceError:
                raise
            raise self.error_class(e.message, original_error=e.original_error) from e
        return len(batch)


class FileReadingSink(FileSink):
    error_class = PersistenceError


class FileAlertSink(FileSink):
    error_class = AlertDispatchError


class BackendSink:
    """Posts each record to a backend entity endpoint"""

    ENDPOINT = ""
    error_class: Type[SalinityMonitorError] = PersistenceError

    def __init__(
        self,
        base_url: Optional[str],
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        if not base_url:
            raise ConfigurationError(f"BACKEND_URL is required for {self.__class__.__name__}")

        self.url = base_url.rstrip("/") + self.ENDPOINT
        self.timeout = timeout
        self.session = session or create_session()
        self.total_persisted: Optional[int] = None

    def _post(self, payload: Dict[str, Any], location: str) -> Dict[str, Any]:
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            raise self.error_class(
                f"POST {self.ENDPOINT} failed",
                location=location,
                url=self.url,
                status_code=status,
                original_error=e
            ) from e

        try:
            return response.json()
        except ValueError:
            return {}

    def flush(self) -> int:
        return 0


class BackendReadingSink(BackendSink):
    ENDPOINT = "/api/entities/SalinityReading"
    error_class = PersistenceError

    def submit(self, reading: EnvironmentalReading) -> Dict[str, Any]:
        return self._post(reading.to_record(), reading.location.name)


class BackendAlertSink(BackendSink):
    ENDPOINT = "/api/entities/Alert"
    error_class = AlertDispatchError

    def submit(self, alert: Alert) -> Dict[str, Any]:
        return self._post(alert.to_record(), alert.location.name)
