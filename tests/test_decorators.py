"""
Tests for the retry and logging decorators.
"""

import logging
from unittest.mock import MagicMock

import pytest
import requests

from airback.decorators import with_logging, with_retry


def _http_error(status):
    response = requests.Response()
    response.status_code = status
    return requests.exceptions.HTTPError(response=response)


class TestWithRetry:
    def test_retries_connection_errors(self):
        func = MagicMock(
            side_effect=[requests.exceptions.ConnectionError(), "ok"]
        )
        wrapped = with_retry(max_attempts=3)(func)

        assert wrapped() == "ok"
        assert func.call_count == 2

    def test_retries_timeouts_until_exhausted(self):
        func = MagicMock(side_effect=requests.exceptions.Timeout("slow"))
        wrapped = with_retry(max_attempts=3)(func)

        with pytest.raises(requests.exceptions.Timeout):
            wrapped()
        assert func.call_count == 3

    def test_retries_server_errors(self):
        func = MagicMock(side_effect=[_http_error(503), _http_error(500), "ok"])
        wrapped = with_retry(max_attempts=3)(func)

        assert wrapped() == "ok"
        assert func.call_count == 3

    def test_does_not_retry_client_errors(self):
        func = MagicMock(side_effect=_http_error(404))
        wrapped = with_retry(max_attempts=3)(func)

        with pytest.raises(requests.exceptions.HTTPError):
            wrapped()
        assert func.call_count == 1

    def test_does_not_retry_other_exceptions(self):
        func = MagicMock(side_effect=KeyError("pm2_5"))
        wrapped = with_retry(max_attempts=3)(func)

        with pytest.raises(KeyError):
            wrapped()
        assert func.call_count == 1


class TestWithLogging:
    def test_logs_entry_and_exit(self, caplog):
        @with_logging("airback.test")
        def add(a, b):
            return a + b

        with caplog.at_level(logging.INFO, logger="airback.test"):
            assert add(1, 2) == 3

        assert "Calling add" in caplog.text
        assert "Completed add" in caplog.text

    def test_logs_and_reraises(self, caplog):
        @with_logging("airback.test")
        def fail():
            raise ValueError("bad")

        with caplog.at_level(logging.INFO, logger="airback.test"):
            with pytest.raises(ValueError):
                fail()

        assert "Error in fail: bad" in caplog.text
