import asyncio
import logging
import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

import httpx

from ..model.paper import RawPaper
from ..config import Config

logger = logging.getLogger(__name__)

ATOM_NS = "{http://www.w3.org/2005/Atom}"
ARXIV_NS = "{http://arxiv.org/schemas/atom}"

RATE_LIMIT_STATUS = {429, 503}
DEFAULT_CATEGORY = "arXiv"

_VERSION_SUFFIX = re.compile(r"v\d+$")
_WHITESPACE = re.compile(r"\s+")


class MalformedFeedError(Exception):
    """Upstream answered with something that is not an Atom document."""


class ArxivFeedClient:
    """
    Fetch entries for one keyword from the arXiv export API.

    Every failure mode (timeout, non-2xx status, transport error, non-XML body)
    is retried with capped exponential backoff; when attempts run out the
    caller gets an empty list instead of an exception.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_attempts: Optional[int] = None,
        backoff_base_ms: Optional[int] = None,
        backoff_cap_ms: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        feed = Config.feed
        self.endpoint = endpoint or feed.endpoint
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else feed.timeout_seconds
        self.max_attempts = max_attempts if max_attempts is not None else feed.max_attempts
        self.backoff_base_ms = backoff_base_ms if backoff_base_ms is not None else feed.backoff_base_ms
        self.backoff_cap_ms = backoff_cap_ms if backoff_cap_ms is not None else feed.backoff_cap_ms
        self.user_agent = feed.user_agent

        self._transport = transport
        self._sleep = sleep

    def backoff_ms(self, attempt: int) -> int:
        return min(self.backoff_base_ms * 2 ** (attempt - 1), self.backoff_cap_ms)

    def build_params(self, keyword: str, max_results: int) -> dict:
        return {
            "search_query": f"all:{keyword}",
            "start": 0,
            "max_results": max_results,
            "sortBy": "submittedDate",
            "sortOrder": "descending",
        }

    async def fetch(self, keyword: str, max_results: Optional[int] = None) -> List[RawPaper]:
        if max_results is None:
            max_results = Config.feed.max_results
        params = self.build_params(keyword, max_results)

        # httpx defaults to 5s; the per-attempt budget is timeout_seconds
        async with httpx.AsyncClient(
            transport=self._transport,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_seconds,
        ) as client:
            for attempt in range(1, self.max_attempts + 1):
                logger.info(
                    f"[arXiv] Fetching papers for {keyword!r} (attempt {attempt}/{self.max_attempts})"
                )
                try:
                    response = await asyncio.wait_for(
                        client.get(self.endpoint, params=params),
                        timeout=self.timeout_seconds,
                    )

                    if response.status_code in RATE_LIMIT_STATUS:
                        logger.warning(f"[arXiv] HTTP {response.status_code}, rate limited or unavailable")
                    elif not response.is_success:
                        logger.error(f"[arXiv] HTTP {response.status_code}: {response.reason_phrase}")
                    else:
                        papers = parse_feed(response.text, keyword)
                        logger.info(f"[arXiv] Fetched {len(papers)} papers for {keyword!r}")
                        return papers

                except (asyncio.TimeoutError, httpx.TimeoutException):
                    logger.warning(
                        f"[arXiv] Request timeout for {keyword!r} (attempt {attempt}/{self.max_attempts})"
                    )
                except MalformedFeedError as e:
                    logger.error(f"[arXiv] Invalid response format: {e}")
                except httpx.HTTPError as e:
                    logger.error(f"[arXiv] Error on attempt {attempt}/{self.max_attempts}: {e}")
                except Exception as e:
                    logger.exception(f"[arXiv] Unexpected error on attempt {attempt}/{self.max_attempts}: {e}")

                if attempt < self.max_attempts:
                    wait_ms = self.backoff_ms(attempt)
                    logger.info(f"[arXiv] Retrying in {wait_ms}ms...")
                    await self._sleep(wait_ms / 1000)

        logger.error(f"[arXiv] Failed to fetch papers after {self.max_attempts} attempts")
        return []


# =========================================================
# Atom parsing
# =========================================================

def parse_feed(text: str, keyword: Optional[str] = None) -> List[RawPaper]:
    """
    Parse an arXiv Atom document into RawPaper records.

    Raises:
        MalformedFeedError: the body is not an XML feed.
    """
    if "<?xml" not in text and "<feed" not in text:
        raise MalformedFeedError("response is not XML")

    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise MalformedFeedError(str(e)) from e

    papers: List[RawPaper] = []
    for entry in root.iter(f"{ATOM_NS}entry"):
        paper = _entry_to_raw_paper(entry, keyword)
        if paper is not None:
            papers.append(paper)
    return papers


def normalize_source_id(id_url: str) -> str:
    last = id_url.rstrip("/").split("/")[-1]
    return _VERSION_SUFFIX.sub("", last)


def build_pdf_url(id_url: str) -> str:
    pdf = _VERSION_SUFFIX.sub("", id_url.rstrip("/").replace("/abs/", "/pdf/", 1))
    return _secure(pdf + ".pdf")


def parse_published(value: str) -> Optional[int]:
    """ISO-8601 timestamp to epoch millis, None if unparseable."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def _collapse(text: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def _secure(url: str) -> str:
    if url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url


def _entry_to_raw_paper(entry: ET.Element, keyword: Optional[str]) -> Optional[RawPaper]:
    id_url = (entry.findtext(f"{ATOM_NS}id") or "").strip()
    source_id = normalize_source_id(id_url) if id_url else ""
    if not source_id:
        return None

    authors = [
        (author.findtext(f"{ATOM_NS}name") or "").strip()
        for author in entry.findall(f"{ATOM_NS}author")
    ]

    category_el = entry.find(f"{ARXIV_NS}primary_category")
    category = category_el.get("term") if category_el is not None else None

    return RawPaper(
        source_id=source_id,
        title=_collapse(entry.findtext(f"{ATOM_NS}title")),
        abstract=_collapse(entry.findtext(f"{ATOM_NS}summary")),
        authors=", ".join(name for name in authors if name),
        published_at=parse_published((entry.findtext(f"{ATOM_NS}published") or "").strip()),
        source_url=_secure(id_url),
        pdf_url=build_pdf_url(id_url),
        category=category or DEFAULT_CATEGORY,
        origin_keyword=keyword,
    )
