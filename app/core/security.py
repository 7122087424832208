import re
import html
from typing import Optional

_SCRIPT_RE = re.compile(r'<script.*?>.*?</script>', flags=re.DOTALL | re.IGNORECASE)
_WHITESPACE_RE = re.compile(r'\s+')


def sanitize_input(text: Optional[str], max_length: int = 1000) -> str:
    """
    Clean free text coming back from the reasoning service before it is
    stored and rendered: drop script blocks, escape HTML, collapse
    whitespace and bound the length.
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    sanitized = _SCRIPT_RE.sub('', text)
    sanitized = html.escape(sanitized, quote=False)
    sanitized = _WHITESPACE_RE.sub(' ', sanitized).strip()
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length - 3].rstrip() + "..."
    return sanitized
