"""ScraperAPI-backed fetch client and floor-map extraction."""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Callable, Iterator, List, Optional, Tuple
from urllib.parse import urlencode

import requests
from bs4 import BeautifulSoup, Tag

from .errors import ConfigError, ExtractionError, TransportError, ValidationError
from .models import FetchResult, Reading
from .result import Err, Ok, Result
from .schedule import KST, format_timestamp, now_in

logger = logging.getLogger(__name__)

SCRAPERAPI_ENDPOINT = "http://api.scraperapi.com"
STATUS_CLASS = re.compile(r"^situ\d+$")


class ScraperApiClient:
    """Fetches a target page through the ScraperAPI bypass service."""

    def __init__(
        self,
        api_key: str,
        target_url: str,
        session: requests.Session | None = None,
        timeout: float | None = None,
        tz_name: str = KST,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ):
        if not api_key or not api_key.strip():
            raise ConfigError("API key is missing or empty")
        if not target_url or not target_url.strip():
            raise ConfigError("target URL is missing or empty")
        self.api_key = api_key.strip()
        self.target_url = target_url.strip()
        self.session = session or requests.Session()
        self.timeout = timeout
        self.tz_name = tz_name
        self.clock = clock or (lambda: now_in(tz_name))

    @classmethod
    def create(cls, api_key: str, target_url: str, **kwargs) -> Result["ScraperApiClient"]:
        try:
            return Ok(cls(api_key, target_url, **kwargs))
        except ConfigError as exc:
            return Err(exc)

    def build_request_url(self) -> str:
        query = urlencode({"api_key": self.api_key, "url": self.target_url})
        return f"{SCRAPERAPI_ENDPOINT}?{query}"

    def fetch(self) -> Result[FetchResult]:
        """Issue one GET; non-2xx responses are still returned as ``Ok``."""
        logger.debug("Fetching %s via ScraperAPI", self.target_url)
        try:
            response = self.session.get(self.build_request_url(), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.debug("Transport failure for %s: %s", self.target_url, exc)
            return Err(TransportError(f"fetch of {self.target_url} failed: {exc}"))

        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = response.apparent_encoding or "utf-8"

        timestamp = format_timestamp(self.clock())
        logger.info(
            "Fetched %s with status %d at %s",
            self.target_url,
            response.status_code,
            timestamp,
        )
        return Ok(
            FetchResult(
                timestamp=timestamp,
                content=response.text,
                status_code=response.status_code,
            )
        )


def validate_response(fetch_result: FetchResult) -> Result[FetchResult]:
    if 200 <= fetch_result.status_code < 300:
        return Ok(fetch_result)
    return Err(ValidationError(fetch_result.status_code))


def extract_readings(content: str, timestamp: str) -> Result[List[Reading]]:
    """Extract readings floor by floor, keeping each pin with its own floor."""
    if not content or not content.strip():
        return Err(ExtractionError("no content"))

    soup = BeautifulSoup(content, "html.parser")
    readings: List[Reading] = []
    for floor, map_region in _iter_floor_blocks(soup):
        for status, location in _iter_pins(map_region):
            readings.append(
                Reading(
                    timestamp=timestamp,
                    floor=floor,
                    location=location,
                    status=status,
                )
            )

    if not readings:
        return Err(ExtractionError("no data found"))
    logger.debug("Extracted %d readings at %s", len(readings), timestamp)
    return Ok(readings)


def parse_fetch_result(fetch_result: FetchResult) -> Result[List[Reading]]:
    return extract_readings(fetch_result.content, fetch_result.timestamp)


def _iter_floor_blocks(soup: BeautifulSoup) -> Iterator[Tuple[str, Tag]]:
    for floor_info in soup.find_all("div", class_="floor_info"):
        number = floor_info.find("div", class_="f_num")
        if number is None:
            continue
        floor = number.get_text(strip=True)
        if not floor:
            continue
        map_region = floor_info.find_next_sibling("div")
        if map_region is None or "floor_img" not in (map_region.get("class") or []):
            logger.debug("Floor %s has no map region; skipping", floor)
            continue
        yield floor, map_region


def _iter_pins(map_region: Tag) -> Iterator[Tuple[str, str]]:
    for pin in map_region.find_all("p", class_="map_pin"):
        status_span = _find_status_span(pin)
        if status_span is None:
            logger.debug("Pin without status span: %s", pin)
            continue
        status = status_span.get_text(strip=True)
        location = _pin_label(status_span)
        if not status or not location:
            continue
        yield status, location


def _find_status_span(pin: Tag) -> Optional[Tag]:
    for span in pin.find_all("span"):
        if any(STATUS_CLASS.match(cls) for cls in span.get("class") or []):
            return span
    return None


def _pin_label(status_span: Tag) -> str:
    parts = []
    for node in status_span.next_siblings:
        text = node.get_text() if isinstance(node, Tag) else str(node)
        parts.append(text)
    return " ".join("".join(parts).split())
