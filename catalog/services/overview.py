"""
Overview projection: the lightweight summary shown in listings.
"""
import re

from catalog import categories

SUMMARY_LENGTH = 100

# Markdown image references: ![alt](url)
_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")


def strip_images(content: str) -> str:
    return _IMAGE_RE.sub("", content or "")


def summarize(content: str, length: int = SUMMARY_LENGTH) -> str:
    """Return the first *length* characters of *content* with images removed."""
    return strip_images(content)[:length]


def statistics_to_dict(statistics) -> dict | None:
    if statistics is None:
        return None
    return {
        "id": statistics.id,
        "view": statistics.view,
        "enjoy": statistics.enjoy,
        "stored": statistics.stored,
    }


def project_overview(article) -> dict:
    """
    Derive the overview dict for *article*.

    Pure: reads the article (and its loaded ``statistics`` / ``user``) and
    never mutates it, so repeated calls return equal results.
    """
    user = getattr(article, "user", None)
    return {
        "id": article.id,
        "created_at": article.created_at,
        "title": article.title,
        "author": article.author,
        "statistics": statistics_to_dict(article.statistics),
        "summary": summarize(article.content),
        "category": categories.decode(article.category),
        "avatar": user.avatar if user is not None else None,
        "is_published": article.is_published,
        "thumbnail": article.thumbnail,
    }
