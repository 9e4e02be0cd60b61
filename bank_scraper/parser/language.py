# === FILE: bank_scraper/parser/language.py ===
"""Language tagging of extracted content: Portuguese or English.

Statistical detection (``langdetect``) decides first. Anything it cannot
map to one of the two supported codes falls back to the URL path, and
the regional default is Portuguese.
"""
from __future__ import annotations

from collections.abc import Sequence

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

from bank_scraper.logger import logger
from bank_scraper.utils import has_path_marker

__all__: Sequence[str] = ("LanguageClassifier", "PORTUGUESE", "ENGLISH")

PORTUGUESE = "pt"
ENGLISH = "en"
SUPPORTED = (PORTUGUESE, ENGLISH)

# langdetect is randomized unless seeded
DetectorFactory.seed = 0


class LanguageClassifier:
    """Classify text as ``"pt"`` or ``"en"``; deterministic for a given text and URL."""

    def __init__(
        self,
        english_markers: Sequence[str] = ("/en/", "/english/"),
        sample_chars: int = 2000,
        default: str = PORTUGUESE,
    ) -> None:
        self.english_markers = tuple(english_markers)
        self.sample_chars = sample_chars
        self.default = default

    def classify(self, text: str, source_url: str) -> str:
        detected = self.detect(text)
        if detected in SUPPORTED:
            return detected
        return self.classify_url(source_url)

    def detect(self, text: str) -> str | None:
        """Statistical code mapped to pt/en; None when unavailable or unsupported."""
        sample = (text or "")[: self.sample_chars].strip()
        if not sample:
            return self.default
        try:
            code = detect(sample)
        except LangDetectException:
            # undetermined: no usable features in the text
            return self.default
        except Exception as exc:
            logger.debug("Language detection unavailable: %s", exc)
            return None
        code = code.lower()
        if code.startswith(PORTUGUESE):
            return PORTUGUESE
        if code.startswith(ENGLISH):
            return ENGLISH
        return None

    def classify_url(self, url: str) -> str:
        if has_path_marker(url, self.english_markers):
            return ENGLISH
        return self.default
