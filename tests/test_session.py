"""
Unit tests for DocumentSession.
"""

from unittest.mock import MagicMock

import pytest
import requests

from src.timetable.config import TimetableConfig
from src.timetable.errors import UpstreamUnavailableError
from src.timetable.session import DocumentSession


class TestDocumentSession:
    """Test suite for DocumentSession."""

    @pytest.fixture
    def http(self):
        """Mock requests session."""
        return MagicMock()

    @pytest.fixture
    def session(self, http):
        return DocumentSession("https://rasps.example.ru/", timeout=7.0, session=http)

    def test_url_translates_group_key(self, session):
        """'ИС502.1' is requested as /group/ИС502/1, percent-encoded."""
        assert session.url_for("ИС502.1") == (
            "https://rasps.example.ru/group/%D0%98%D0%A1502/1"
        )

    def test_fetch_returns_text(self, session, http):
        http.get.return_value = MagicMock(ok=True, status_code=200, text="<html></html>")

        assert session.fetch("ИС502.2") == "<html></html>"
        http.get.assert_called_once_with(
            "https://rasps.example.ru/group/%D0%98%D0%A1502/2", timeout=7.0
        )

    def test_non_success_status_raises(self, session, http):
        http.get.return_value = MagicMock(ok=False, status_code=503, text="")

        with pytest.raises(UpstreamUnavailableError, match="503"):
            session.fetch("ИС502.1")

    @pytest.mark.parametrize(
        "error", [requests.ConnectionError("refused"), requests.Timeout("slow")]
    )
    def test_network_errors_raise(self, session, http, error):
        http.get.side_effect = error

        with pytest.raises(UpstreamUnavailableError):
            session.fetch("ИС502.1")

    def test_user_agent_header(self, http):
        DocumentSession(session=http, user_agent="tests/1.0")

        http.headers.__setitem__.assert_called_once_with("User-Agent", "tests/1.0")

    def test_from_config(self):
        config = TimetableConfig(base_url="https://example.org", request_timeout=3)

        with DocumentSession.from_config(config) as session:
            assert session.base_url == "https://example.org"
            assert session.timeout == 3
            assert session.session.headers["User-Agent"] == config.user_agent

    def test_context_manager_closes(self, http):
        with DocumentSession(session=http):
            pass

        http.close.assert_called_once()
