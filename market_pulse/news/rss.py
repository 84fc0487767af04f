"""
RSS feed parsing.

Feeds are parsed with feedparser into plain ``NewsItem`` records; nothing
downstream looks at markup.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import feedparser

TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class NewsItem:
    title: str
    link: str
    date: str
    description: str
    source: str = ""
    published: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "date": self.date,
            "description": self.description,
            "source": self.source,
        }


def strip_html(text: str) -> str:
    return WHITESPACE_RE.sub(" ", TAG_RE.sub("", text or "")).strip()


def _published(entry: Any) -> Optional[datetime]:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return datetime(*parsed[:6], tzinfo=timezone.utc)


def parse_feed(text: str, source: str = "", description_limit: int = 500) -> List[NewsItem]:
    """
    Parse an RSS or Atom document.

    Args:
        text: Raw feed document.
        source: Feed name attached to every item.
        description_limit: Maximum description length after HTML stripping.

    Returns:
        List[NewsItem]: Items with a non-empty title, in feed order.
    """
    feed = feedparser.parse(text)
    items = []
    for entry in feed.entries:
        title = strip_html(entry.get("title", ""))
        if not title:
            continue
        items.append(
            NewsItem(
                title=title,
                link=(entry.get("link") or "").strip(),
                date=entry.get("published") or entry.get("updated") or "",
                description=strip_html(entry.get("summary", ""))[:description_limit],
                source=source,
                published=_published(entry),
            )
        )
    return items
