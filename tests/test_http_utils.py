"""
Tests for HTTP utilities — utils/http.py

Tests RetryStrategy, SessionManager and fetch_json without requiring actual
network calls.
"""
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.http import RetryStrategy, SessionManager, fetch_json


# ── RetryStrategy tests ──────────────────────────────────────────────────────

class TestRetryStrategy:
    def test_defaults(self):
        rs = RetryStrategy()
        assert rs.max_retries == 0
        assert rs.backoff_factor == 2.0
        assert 429 in rs.status_forcelist
        assert 503 in rs.status_forcelist

    def test_custom_params(self):
        rs = RetryStrategy(max_retries=5, backoff_factor=1.0,
                           status_forcelist=[500, 502])
        assert rs.max_retries == 5
        assert rs.backoff_factor == 1.0
        assert rs.status_forcelist == [500, 502]

    def test_get_retry_object(self):
        rs = RetryStrategy(max_retries=4, backoff_factor=3.0)
        retry = rs.get_retry_object()
        assert retry.total == 4
        assert retry.backoff_factor == 3.0

    def test_default_retry_object_never_retries(self):
        retry = RetryStrategy().get_retry_object()
        assert retry.total == 0

    def test_retry_allowed_methods(self):
        retry = RetryStrategy().get_retry_object()
        allowed = retry.allowed_methods
        assert "GET" in allowed
        assert "HEAD" in allowed
        assert "POST" not in allowed

    def test_exhausted_retries_do_not_raise_on_status(self):
        # The final 5xx response must reach raise_for_status()
        assert RetryStrategy(max_retries=2).get_retry_object().raise_on_status is False


# ── SessionManager tests ─────────────────────────────────────────────────────

class TestSessionManager:
    def test_creates_session(self):
        sm = SessionManager()
        session = sm.session
        assert isinstance(session, requests.Session)
        sm.close()

    def test_session_cached(self):
        """Accessing .session twice returns the same object."""
        sm = SessionManager()
        s1 = sm.session
        s2 = sm.session
        assert s1 is s2
        sm.close()

    def test_adapter_carries_retry_budget(self):
        sm = SessionManager(retry_strategy=RetryStrategy(max_retries=3))
        adapter = sm.session.get_adapter("https://example.test/")
        assert adapter.max_retries.total == 3
        sm.close()

    def test_close_resets_session(self):
        sm = SessionManager()
        _ = sm.session
        sm.close()
        assert sm._session is None

    def test_close_idempotent(self):
        sm = SessionManager()
        sm.close()  # no session yet
        sm.close()  # still fine

    def test_context_manager(self):
        with SessionManager() as sm:
            session = sm.session
            assert session is not None
        # After exit, session should be closed
        assert sm._session is None

    def test_custom_pool_settings(self):
        sm = SessionManager(pool_connections=5, pool_maxsize=10)
        assert sm.pool_connections == 5
        assert sm.pool_maxsize == 10
        sm.close()


# ── fetch_json tests ─────────────────────────────────────────────────────────

class TestFetchJson:
    def _mock_session(self, payload=None, status=200, raise_exc=None, bad_json=False):
        session = MagicMock()
        if raise_exc:
            session.get.side_effect = raise_exc
            return session

        response = MagicMock()
        response.status_code = status
        response.raise_for_status = MagicMock()
        if status >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(f"{status}")
        if bad_json:
            response.json.side_effect = ValueError("Expecting value")
        else:
            response.json.return_value = payload
        session.get.return_value = response
        return session

    def test_success(self):
        session = self._mock_session(payload={"data": [["1947-01-01", 243.1]]})
        result = fetch_json("https://example.test/gdp.json", session=session)
        assert result == {"data": [["1947-01-01", 243.1]]}

    def test_single_get_with_timeout(self):
        session = self._mock_session(payload={})
        fetch_json("https://example.test/gdp.json", session=session, timeout=15)
        session.get.assert_called_once_with("https://example.test/gdp.json", timeout=15)

    def test_default_timeout_is_none(self):
        session = self._mock_session(payload={})
        fetch_json("https://example.test/gdp.json", session=session)
        assert session.get.call_args.kwargs["timeout"] is None

    def test_http_error_raises(self):
        session = self._mock_session(status=500)
        with pytest.raises(requests.HTTPError):
            fetch_json("https://example.test/gdp.json", session=session)

    def test_connection_error_raises(self):
        session = self._mock_session(raise_exc=requests.ConnectionError("refused"))
        with pytest.raises(requests.ConnectionError):
            fetch_json("https://example.test/gdp.json", session=session)

    def test_bad_json_raises_value_error(self):
        session = self._mock_session(bad_json=True)
        with pytest.raises(ValueError):
            fetch_json("https://example.test/gdp.json", session=session)

    def test_without_session_uses_throwaway_session(self):
        session = self._mock_session(payload={"data": []})
        session.__enter__.return_value = session
        with patch("utils.http.requests.Session", return_value=session) as factory:
            result = fetch_json("https://example.test/gdp.json")
        factory.assert_called_once_with()
        session.__exit__.assert_called_once()
        assert result == {"data": []}
