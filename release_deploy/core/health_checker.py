"""HTTP health verification with bounded retries"""

import asyncio
import logging
from typing import Optional, Tuple

import httpx

from ..api.exceptions import InputValidationError, InvalidRangeError
from ..constants import (
    DEFAULT_HEALTHCHECK_CODE_RANGE,
    DEFAULT_HEALTHCHECK_TIMEOUT,
    DEFAULT_HEALTHCHECK_RETRIES,
    DEFAULT_HEALTHCHECK_DELAY,
    DEFAULT_HEALTHCHECK_INTERVAL,
    EMOJI_SUCCESS,
    EMOJI_ERROR,
)
from ..models.result import HealthCheckResult

logger = logging.getLogger(__name__)


def parse_code_range(code_range: str) -> Tuple[int, int]:
    """
    Parse a status code range such as "200-299"

    Args:
        code_range: Range string

    Returns:
        (min, max) tuple; min <= max is not enforced

    Raises:
        InvalidRangeError: If the string is not two integers joined by "-"
    """
    parts = str(code_range).split('-')
    if len(parts) != 2:
        raise InvalidRangeError(code_range)

    try:
        return int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        raise InvalidRangeError(code_range)


def check_url(url: str) -> httpx.URL:
    """
    Parse a health check URL

    Raises:
        InputValidationError: If the URL cannot be parsed or is not http(s)
    """
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InputValidationError(f"Invalid health check URL: {url} ({e})")

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InputValidationError(f"Invalid health check URL: {url} (expected an http or https URL)")

    return parsed


class HealthChecker:
    """Polls a URL until its status code falls within an accepted range"""

    def __init__(self,
                 url: str,
                 code_range: str = DEFAULT_HEALTHCHECK_CODE_RANGE,
                 timeout: int = DEFAULT_HEALTHCHECK_TIMEOUT,
                 retries: int = DEFAULT_HEALTHCHECK_RETRIES,
                 delay: int = DEFAULT_HEALTHCHECK_DELAY,
                 interval: int = DEFAULT_HEALTHCHECK_INTERVAL):
        """
        Initialize health checker

        Args:
            url: URL to GET
            code_range: Accepted status codes, inclusive ("200-299")
            timeout: Per-attempt deadline in seconds (0 disables it)
            retries: Maximum number of attempts
            delay: Seconds to wait before the first attempt
            interval: Seconds to wait between attempts
        """
        if retries < 1:
            raise InputValidationError(f"Health check retries must be at least 1, got {retries}")

        self.url = url
        self.code_range = code_range
        self.timeout = timeout
        self.retries = retries
        self.delay = delay
        self.interval = interval

    async def verify(self) -> HealthCheckResult:
        """Run the health check loop

        Returns:
            HealthCheckResult; a failed check is a result, not an exception

        Raises:
            InvalidRangeError: If the code range is malformed (before any request)
        """
        min_code, max_code = parse_code_range(self.code_range)

        logger.info(f"Starting health check: {self.url}")
        logger.info(f"Expected status code range: {self.code_range}")
        logger.info(
            f"Timeout: {self.timeout}s, Retries: {self.retries}, "
            f"Delay: {self.delay}s, Interval: {self.interval}s"
        )

        if self.delay > 0:
            logger.info(f"Waiting {self.delay} seconds before first health check attempt...")
            await asyncio.sleep(self.delay)

        last_status: Optional[int] = None
        last_error: Optional[str] = None

        async with httpx.AsyncClient() as client:
            for attempt in range(1, self.retries + 1):
                logger.info(f"Health check attempt {attempt}/{self.retries}...")

                status_code, error = await self._request(client)

                if error:
                    last_error = error
                    logger.warning(f"Attempt {attempt} failed: {error}")
                else:
                    last_status = status_code
                    logger.info(f"Received status code: {status_code}")

                    if min_code <= status_code <= max_code:
                        logger.info(f"{EMOJI_SUCCESS} Health check passed on attempt {attempt}")
                        return HealthCheckResult(
                            success=True,
                            status_code=status_code,
                            attempts=attempt
                        )

                    last_error = (
                        f"Status code {status_code} is outside expected range {self.code_range}"
                    )
                    logger.warning(f"Attempt {attempt} failed: {last_error}")

                if attempt < self.retries and self.interval > 0:
                    logger.info(f"Waiting {self.interval} seconds before next attempt...")
                    await asyncio.sleep(self.interval)

        logger.error(f"{EMOJI_ERROR} Health check failed after {self.retries} attempts")
        return HealthCheckResult(
            success=False,
            status_code=last_status,
            attempts=self.retries,
            error=last_error or "Health check failed"
        )

    async def _request(self, client: httpx.AsyncClient) -> Tuple[Optional[int], Optional[str]]:
        """Issue one GET bounded by the per-attempt deadline

        Returns:
            (status_code, None) on a response, (None, error) on failure
        """
        deadline = self.timeout if self.timeout > 0 else None

        try:
            response = await asyncio.wait_for(
                client.get(self.url, timeout=deadline),
                timeout=deadline
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return None, f"Request timed out after {self.timeout} seconds"
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return None, str(e) or e.__class__.__name__

        return response.status_code, None


async def verify_health(url: str,
                        code_range: str = DEFAULT_HEALTHCHECK_CODE_RANGE,
                        timeout: int = DEFAULT_HEALTHCHECK_TIMEOUT,
                        retries: int = DEFAULT_HEALTHCHECK_RETRIES,
                        delay: int = DEFAULT_HEALTHCHECK_DELAY,
                        interval: int = DEFAULT_HEALTHCHECK_INTERVAL) -> HealthCheckResult:
    """
    Verify a URL is healthy

    Convenience wrapper around HealthChecker.
    """
    checker = HealthChecker(
        url,
        code_range=code_range,
        timeout=timeout,
        retries=retries,
        delay=delay,
        interval=interval
    )
    return await checker.verify()
