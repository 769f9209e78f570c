# postgen/lib/sanitize.py
import re
from typing import Optional

from postgen.schemas import CoverSummary, GeneratedPost

# The model sometimes echoes the JSON key inside the value,
# e.g. 'highlight_text: 深度思考' or '"mainTitle": "..."'.
_KEY_ECHO_RE = re.compile(
    r"""^\s*["'“”‘’]?
        (?:[A-Za-z]+(?:_[A-Za-z0-9]+)+            # snake_case
          |mainTitle|highlightText|bodyPreview|coverSummary|imagePrompt
          |(?i:title|content|tags|highlight))
        ["'“”‘’]?\s*[:：]\s*""",
    re.VERBOSE,
)

_QUOTE_PAIRS = {
    '"': '"',
    "'": "'",
    "“": "”",
    "‘": "’",
    "「": "」",
    "『": "』",
}


def _strip_quote_layer(s: str) -> str:
    if len(s) < 2 or _QUOTE_PAIRS.get(s[0]) != s[-1]:
        return s
    inner = s[1:-1]
    # '"Yes" or "No"' is two quoted phrases, not one wrapped value
    if s[0] in inner or s[-1] in inner:
        return s
    return inner.strip()


def sanitize_field(value: Optional[str]) -> str:
    """Strip a leaked key name and surrounding quotes from a short field. Idempotent."""
    if not value:
        return ""
    s = value.strip()
    while True:
        cleaned = _strip_quote_layer(_KEY_ECHO_RE.sub("", s, count=1).strip())
        if cleaned == s:
            return s
        s = cleaned


def sanitize_summary(summary: CoverSummary) -> CoverSummary:
    return CoverSummary(
        main_title=sanitize_field(summary.main_title),
        highlight_text=sanitize_field(summary.highlight_text),
        body_preview=sanitize_field(summary.body_preview),
    )


def sanitize_post(post: GeneratedPost) -> GeneratedPost:
    # content is long-form; colons there are punctuation, leave it alone
    update = {"title": sanitize_field(post.title)}
    if post.cover_summary is not None:
        update["cover_summary"] = sanitize_summary(post.cover_summary)
    return post.model_copy(update=update)
