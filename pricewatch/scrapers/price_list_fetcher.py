# pricewatch/scrapers/price_list_fetcher.py

"""Single-attempt HTTP fetcher for the published price list."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

from curl_cffi import requests as curl_requests
from curl_cffi.requests.exceptions import RequestException, Timeout

from pricewatch.config.settings import Settings

FetchErrorKind = Literal["network", "timeout", "http-status"]


@dataclass(frozen=True)
class RawDocument:
    """Undecoded response body of a successful fetch."""

    url: str
    content: bytes
    status_code: int
    fetched_at: datetime


@dataclass(frozen=True)
class FetchError:
    """Why a fetch produced no document."""

    kind: FetchErrorKind
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class PriceListFetcher:
    """Fetches the raw price-list document over HTTP.

    Exactly one request is made per :meth:`fetch` call; retrying is left
    to whoever triggers the next cycle.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger("pricewatch.fetcher")
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def fetch(
        self,
        url: str,
        timeout: float | None = None,
    ) -> RawDocument | FetchError:
        """GET *url* once and return its bytes or a typed error."""
        request_timeout = (
            timeout if timeout is not None
            else self.settings.REQUEST_TIMEOUT
        )
        self.logger.info(
            "Fetching price list from %s (timeout=%ss)",
            url,
            request_timeout,
        )
        try:
            resp = self.session.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=request_timeout,
            )
        except Timeout as exc:
            self.logger.warning(
                "Fetch timed out after %ss: %s", request_timeout, exc,
            )
            return FetchError(kind="timeout", message=str(exc))
        except RequestException as exc:
            self.logger.warning(
                "Network error while fetching %s: %s",
                url,
                exc,
                exc_info=True,
            )
            return FetchError(kind="network", message=str(exc))

        if not 200 <= resp.status_code < 300:
            self.logger.warning(
                "HTTP %d from %s", resp.status_code, url,
            )
            return FetchError(
                kind="http-status",
                message=f"HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        content: bytes = resp.content
        self.logger.debug(
            "Fetched %d bytes (HTTP %d)", len(content), resp.status_code,
        )
        return RawDocument(
            url=url,
            content=content,
            status_code=resp.status_code,
            fetched_at=datetime.now(timezone.utc),
        )

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()
