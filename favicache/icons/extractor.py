"""Icon extractor for finding icon candidates in fetched pages"""

import logging
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from favicache.icons.constants import (
    DEFAULT_FAVICON_PATH,
    DEFAULT_FAVICON_PRIORITY,
    LINK_HREF_PATTERN,
    LINK_REL_PATTERN,
    PARSER,
)
from favicache.icons.models import IconCandidate, Page
from favicache.icons.ranker import get_icon_priority, rank_candidates

logger = logging.getLogger(__name__)


def _attribute_text(value: Any) -> str:
    """Return an attribute as text. BeautifulSoup returns multi-valued ones like `rel` as lists."""
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


class IconExtractor:
    """Build the ranked list of icon candidates for a domain."""

    @staticmethod
    def default_candidates(domain: str) -> list[IconCandidate]:
        """Guess `/favicon.ico` on both schemes when no page could be fetched."""
        return [
            IconCandidate(
                priority=DEFAULT_FAVICON_PRIORITY,
                href=f"https://{domain}{DEFAULT_FAVICON_PATH}",
            ),
            IconCandidate(
                priority=DEFAULT_FAVICON_PRIORITY,
                href=f"http://{domain}{DEFAULT_FAVICON_PATH}",
            ),
        ]

    def scrape_links(self, page: Page) -> list[dict[str, str]]:
        """Return `href` and `sizes` of `<link>` tags that look like usable icons."""
        links = []
        try:
            soup = BeautifulSoup(page.body, PARSER)
            for link in soup.find_all("link"):
                rel = _attribute_text(link.get("rel"))
                href = _attribute_text(link.get("href")).strip()
                if not LINK_REL_PATTERN.search(rel) or not LINK_HREF_PATTERN.search(href):
                    continue
                links.append({"href": href, "sizes": _attribute_text(link.get("sizes"))})
        except Exception as e:
            logger.warning(f"Error scraping icon links from {page.url}: {e}")
        return links

    def extract(self, page: Page) -> list[IconCandidate]:
        """Return ranked candidates: the page's icon links plus a `/favicon.ico` guess.

        Relative links are resolved against the page's final URL, after redirects.
        """
        candidates = [
            IconCandidate(
                priority=DEFAULT_FAVICON_PRIORITY,
                href=urljoin(page.url, DEFAULT_FAVICON_PATH),
            )
        ]

        for link in self.scrape_links(page):
            try:
                href = urljoin(page.url, link["href"])
            except ValueError as e:
                logger.info(f"Skipping malformed icon link {link['href']!r} on {page.url}: {e}")
                continue
            candidates.append(
                IconCandidate(priority=get_icon_priority(href, link["sizes"]), href=href)
            )

        return rank_candidates(candidates)
