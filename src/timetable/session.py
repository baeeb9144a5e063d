"""HTTP session for fetching group schedule pages.

DocumentSession wraps a requests.Session so connection pooling and headers
are shared across a whole refresh batch. Failures are classified as
UpstreamUnavailableError and never retried here: the next scheduled refresh
cycle is the retry.
"""

from urllib.parse import quote

import requests

from src.timetable.config import TimetableConfig
from src.timetable.errors import UpstreamUnavailableError
from src.timetable.logging import get_logger
from src.timetable.utils import group_path

logger = get_logger(__name__)


class DocumentSession:
    """Fetches raw group pages from the schedule site."""

    GROUP_PATH = "/group/{path}"

    def __init__(
        self,
        base_url: str = "https://rasps.nsuem.ru",
        timeout: float = 30.0,
        user_agent: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize DocumentSession.

        Args:
            base_url: Schedule site base URL, without trailing slash.
            timeout: Per-request timeout in seconds.
            user_agent: Optional User-Agent header.
            session: Pre-built requests session (tests inject a mock here).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    @classmethod
    def from_config(cls, config: TimetableConfig) -> "DocumentSession":
        return cls(
            base_url=config.base_url,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )

    def url_for(self, group_key: str) -> str:
        """Page URL for a caller-facing group key ("ИС502.1" -> .../group/ИС502/1)."""
        path = quote(group_path(group_key), safe="/")
        return f"{self.base_url}{self.GROUP_PATH.format(path=path)}"

    def fetch(self, group_key: str) -> str:
        """Download the raw page markup for one group.

        Raises:
            UpstreamUnavailableError: On connection errors, timeouts or non-2xx responses.
        """
        url = self.url_for(group_key)
        logger.debug("document_fetch_started", group=group_key, url=url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("document_fetch_error", group=group_key, error=str(e))
            raise UpstreamUnavailableError(f"Fetching {url} failed: {e}") from e

        if not resp.ok:
            logger.warning(
                "document_fetch_status", group=group_key, status=resp.status_code
            )
            raise UpstreamUnavailableError(
                f"Fetching {url} returned HTTP {resp.status_code}"
            )

        logger.debug("document_fetched", group=group_key, size=len(resp.text))
        return resp.text

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "DocumentSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
