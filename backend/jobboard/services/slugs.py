"""URL slug helpers for companies, job posts, skills and categories."""
import re
import time

_NON_WORD = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """
    Lowercase, drop punctuation, join words with dashes.

    >>> slugify("  Acme Corp. (EU) ")
    'acme-corp-eu'
    """
    slug = _NON_WORD.sub("", text.lower().strip())
    slug = _WHITESPACE.sub("-", slug)
    slug = _DASHES.sub("-", slug).strip("-")
    return slug


def job_post_slug(title: str, now_ms: int | None = None) -> str:
    """Job slugs are unique by construction: title slug plus epoch millis."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{slugify(title) or 'job'}-{now_ms}"


def suffixed(base: str, counter: int) -> str:
    """Candidate slug for the n-th collision (0 means the bare base)."""
    return base if counter == 0 else f"{base}-{counter}"
