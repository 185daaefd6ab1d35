"""Character-level clean-up applied to content HTML before text conversion."""

from __future__ import annotations

import re

_ENTITIES = {
    "&amp;": "&",
    "&quot;": '"',
    "&apos;": "'",
    "&nbsp;": " ",
    "&lt;": "<",
    "&gt;": ">",
}

_SINGLE_QUOTES_RE = re.compile("[\u0019‘’]")
_DOUBLE_QUOTES_RE = re.compile("[“”]")
_CONTROL_RE = re.compile("[\u0014-\u001f\u007f-\u009f]")
_DASH_RE = re.compile("[–—]")
_ENTITY_RE = re.compile(r"&[#A-Za-z0-9]+;")


def sanitize_html(html: str) -> str:
    """Normalise quotes and dashes, strip control characters, settle entities.

    Only the handful of entities in ``_ENTITIES`` are decoded (plus the
    ``&#xA0;`` no-break space); every other entity reference is dropped.
    """
    html = _SINGLE_QUOTES_RE.sub("'", html or "")
    html = _DOUBLE_QUOTES_RE.sub('"', html)
    html = _CONTROL_RE.sub("", html)
    html = _DASH_RE.sub("-", html)
    html = html.replace("&#xA0;", " ")
    return _ENTITY_RE.sub(lambda m: _ENTITIES.get(m.group(0), ""), html)
