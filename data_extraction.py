import argparse
import json
import logging
import os
import re
import sys
from typing import Any, List, Optional

import requests
from dotenv import load_dotenv

from models import ChapterError, ChapterResult, LoadResult, Verse

load_dotenv()

# ===== Config =====
GEETA_API_URL = os.getenv("GEETA_API_URL", "https://sanskrit.ie/api/geeta.php")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "20"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
# ==================

# non-greedy, stops at the first closing tag; nested markup is kept as-is.
# A paragraph never spans a line terminator (\n, \r, \u2028, \u2029).
VERSE_PATTERN = re.compile(r"<p[^>]*>([^\n\r\u2028\u2029]*?)</p>")

# whitespace plus the byte order mark
EDGE_SPACE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")

logger = logging.getLogger(__name__)


def configure_logging(stream, level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(stream)],
    )


class ChapterLoadError(Exception):
    reason = "unexpected"


class ApiFetchError(ChapterLoadError):
    reason = "fetch_failed"


class NoDataError(ChapterLoadError):
    reason = "no_data"


class LyricsNotFoundError(ChapterLoadError):
    reason = "lyrics_not_found"


class NoVersesError(ChapterLoadError):
    reason = "no_verses"


def scrape_verses(html: str) -> List[str]:
    """Pull the trimmed inner text of every <p>...</p> in the lyrics HTML."""
    verses = [EDGE_SPACE.sub("", m) for m in VERSE_PATTERN.findall(html)]
    if not verses:
        raise NoVersesError("No <p> verses found inside lyrics HTML")
    return verses


def number_verses(texts: List[str]) -> List[Verse]:
    return [Verse(shlok_no=i, shlok=text) for i, text in enumerate(texts, start=1)]


def join_full_text(texts: List[str]) -> str:
    """Flat text for text-to-speech."""
    return ". ".join(texts)


def extract_lyrics(payload: Any) -> str:
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list) or not data:
        raise NoDataError("API returned no data")

    first = data[0]
    html = first.get("lyrics") if isinstance(first, dict) else None
    if not html or not isinstance(html, str):
        raise LyricsNotFoundError("Lyrics not found in API")
    return html


class ChapterLoader:
    """Turns a chapter id into a LoadResult using the Geeta API.

    The endpoint, timeout and HTTP session are injected so the loader can be
    pointed at a different server or driven by a stub session in tests.
    """

    def __init__(self, base_url: str = GEETA_API_URL, timeout: float = HTTP_TIMEOUT, session=None):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session if session is not None else requests

    def build_url(self, chapter_id) -> str:
        return f"{self.base_url}?q={chapter_id}"

    def fetch_payload(self, chapter_id) -> Any:
        url = self.build_url(chapter_id)
        logger.info("Fetching: %s", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiFetchError(f"API fetch failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise ApiFetchError(f"API fetch failed with status: {resp.status_code}")

        # API returns JSON, the verses are HTML inside it
        return resp.json()

    def load(self, chapter_id) -> LoadResult:
        try:
            payload = self.fetch_payload(chapter_id)
            html = extract_lyrics(payload)
            verses = scrape_verses(html)

            chapter_data = number_verses(verses)
            full_text = join_full_text(verses)

            logger.info("Extracted verses: %d", len(chapter_data))
            return ChapterResult(chapterData=chapter_data, fullText=full_text)
        except Exception as e:
            logger.error("SERVER FETCH ERROR: %s", e, exc_info=True)
            reason = e.reason if isinstance(e, ChapterLoadError) else "unexpected"
            return ChapterError(message=str(e), reason=reason)


def load_chapter(chapter_id, loader: Optional[ChapterLoader] = None) -> LoadResult:
    """Load one chapter with the given loader, or a default one."""
    loader = loader or ChapterLoader()
    return loader.load(chapter_id)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch one Bhagavad Gita chapter as numbered shloks.")
    parser.add_argument("chapter_id", help="chapter identifier passed to the API as-is")
    parser.add_argument("--out", help="write the result JSON here instead of stdout")
    args = parser.parse_args(argv)

    configure_logging(sys.stderr)

    result = load_chapter(args.chapter_id)
    body = json.dumps(result.model_dump(), ensure_ascii=False, indent=2)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(body)
        print(f"Saved to {args.out}", file=sys.stderr)
    else:
        print(body)

    if isinstance(result, ChapterError):
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    print(f"Total verses collected: {len(result.chapterData)}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
