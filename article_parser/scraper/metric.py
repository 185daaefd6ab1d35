"""Word-richness score used to rank competing extraction candidates."""

from __future__ import annotations

import re
from typing import Optional

_TAG_RE = re.compile(r"<[^>]+>")


def score(html_or_text: Optional[str]) -> int:
    """Count whitespace-delimited words in *html_or_text* once tags are removed.

    Tags are replaced with a space so ``<p>a</p><p>b</p>`` counts two words.

    >>> score("<p>Hello <b>big</b> world</p>")
    3
    """
    if not html_or_text:
        return 0
    return len(_TAG_RE.sub(" ", html_or_text).split())
