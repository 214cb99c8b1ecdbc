# Airback: compare today's air quality with the same day in past years
# Copyright (C) 2025 Ruaraidh Dobson, South London Scientific

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Function decorators for cross-cutting concerns.

Retry logic for upstream HTTP calls and entry/exit logging, kept out of
the fetchers so their bodies only describe the request being made.
"""

import logging
from functools import wraps
from typing import Callable, TypeVar

import requests
from tenacity import (
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

F = TypeVar("F", bound=Callable)

logger = logging.getLogger(__name__)


def _is_server_error(exception: BaseException) -> bool:
    """Only HTTP 5xx responses are worth retrying; 4xx will not change."""
    if isinstance(exception, requests.exceptions.HTTPError):
        if exception.response is not None:
            return 500 <= exception.response.status_code < 600
    return False


def with_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
    multiplier: float = 2.0,
) -> Callable[[F], F]:
    """
    Decorator to add exponential backoff retry logic to a function.

    Retries on connection errors, timeouts and HTTP 5xx errors. The last
    exception is re-raised once all attempts are used.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait: Minimum wait time between retries in seconds (default: 1.0)
        max_wait: Maximum wait time between retries in seconds (default: 10.0)
        multiplier: Multiplier for exponential backoff (default: 2.0)

    Returns:
        Callable: Decorated function with retry logic

    Example:
        >>> @with_retry(max_attempts=5, min_wait=2.0)
        ... def fetch_json(url):
        ...     response = requests.get(url)
        ...     response.raise_for_status()
        ...     return response.json()
    """

    def decorator(func: F) -> F:
        @retry(
            retry=(
                retry_if_exception_type(requests.exceptions.ConnectionError)
                | retry_if_exception_type(requests.exceptions.Timeout)
                | retry_if_exception(_is_server_error)
            ),
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            after=after_log(logger, logging.DEBUG),
            reraise=True,
        )
        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        return wrapper

    return decorator


def with_logging(logger_name: str | None = None) -> Callable[[F], F]:
    """
    Decorator to add logging to function entry and exit.

    Calls are logged at INFO level. Errors are logged at ERROR level before
    being re-raised.

    Args:
        logger_name: Name of logger to use. If None, uses the module name.

    Returns:
        Callable: Decorated function with logging
    """

    def decorator(func: F) -> F:
        func_logger = logging.getLogger(logger_name or func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            func_logger.info(
                f"Calling {func.__name__}",
                extra={
                    "function": func.__name__,
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                },
            )

            try:
                result = func(*args, **kwargs)
                func_logger.info(
                    f"Completed {func.__name__}", extra={"function": func.__name__}
                )
                return result
            except Exception as e:
                func_logger.error(
                    f"Error in {func.__name__}: {e}",
                    extra={
                        "function": func.__name__,
                        "error_type": type(e).__name__,
                    },
                )
                raise

        return wrapper

    return decorator


# Standard retry for upstream API calls
retry_on_network_error = with_retry(
    max_attempts=3, min_wait=1.0, max_wait=10.0, multiplier=2.0
)

# Nominatim asks clients to back off; be slower about it
retry_gentle = with_retry(max_attempts=3, min_wait=2.0, max_wait=30.0, multiplier=3.0)
