"""
Key layout for the article cache.

Full records and the summary list live in separate namespaces so that no
slug can ever collide with the summary key.
"""

ARTICLE_PREFIX = "article:"
SUMMARY_KEY = "articles-summary"


def article_key(slug: str) -> str:
    """Key holding the full record for one article."""
    return f"{ARTICLE_PREFIX}{slug}"

