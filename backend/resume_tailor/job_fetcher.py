import logging
import re
from typing import List
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from . import config
from .errors import FetchError, InvalidURL

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

# Checked in order; the first element with enough text wins.
JOB_CONTENT_SELECTORS: List[str] = [
    # job description containers
    ".job-description",
    "#job-description",
    "[data-automation='jobDescriptionSection']",
    "[data-testid='jobDescriptionText']",
    ".description",
    "#description",
    # requirements
    ".job-requirements",
    "#job-requirements",
    ".qualifications",
    "#qualifications",
    # generic content containers
    ".content",
    "#content",
    "article",
    "main",
    ".main",
]

MIN_CONTENT_CHARS = 100


def validate_url(url: str) -> str:
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError):
        raise InvalidURL("Invalid URL provided")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidURL("Invalid URL provided")
    return url


def clean_text(text: str) -> str:
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def extract_job_details(html: str) -> str:
    """Best-effort plain text of a job posting page.

    Walks JOB_CONTENT_SELECTORS and takes the first element whose text is
    longer than MIN_CONTENT_CHARS; otherwise falls back to the page body.
    """
    soup = BeautifulSoup(html, "lxml")
    content = None
    for selector in JOB_CONTENT_SELECTORS:
        el = soup.select_one(selector)
        if el is not None and len(el.get_text().strip()) > MIN_CONTENT_CHARS:
            content = el
            logger.debug(f"Job content matched selector {selector!r}")
            break
    if content is None:
        content = soup.body or soup
    return clean_text(content.get_text())


async def fetch_job_details(url: str) -> str:
    """Fetch a job posting and return its extracted text (single attempt)."""
    url = validate_url(url)
    try:
        async with httpx.AsyncClient(
            headers=BROWSER_HEADERS, timeout=config.JOB_FETCH_TIMEOUT, follow_redirects=True
        ) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        logger.error(f"Error fetching job details from {url}: {e}")
        raise FetchError(f"Failed to fetch job details: {e}") from e

    if not 200 <= response.status_code < 300:
        raise FetchError(f"Failed to fetch job details: HTTP {response.status_code}")

    return extract_job_details(response.text)
