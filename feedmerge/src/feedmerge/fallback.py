import datetime
from typing import List, Optional

from .dates import to_iso
from .models.feed import CanonicalItem, FeedInfo, FeedResult

# (title, link, description, days ago, category, source, feed title)
_EXAMPLE_ITEMS = [
    (
        "Latest Project Update: New Feature Release",
        "https://yourblog.com/post1",
        "Exciting new features have been added to the project...",
        2, "Development", "Blog", "Personal Blog",
    ),
    (
        "Speaking at Tech Conference 2025",
        "https://conference.com/speaker/you",
        "Excited to announce my upcoming speaking engagement...",
        4, "Events", "Events", "Professional Updates",
    ),
    (
        "Open Source Contribution Milestone",
        "https://github.com/project/milestone",
        "Reached an important milestone in open source contributions...",
        7, "Open Source", "GitHub", "Development Updates",
    ),
]


def create_example_data(now: Optional[datetime.datetime] = None) -> List[FeedResult]:
    """
    Placeholder dataset used when no source is configured, so the outputs
    are never empty. Timestamps are relative to `now`.
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    items = []
    for title, link, description, days_ago, category, source, feed_title in _EXAMPLE_ITEMS:
        stamp = to_iso(now - datetime.timedelta(days=days_ago))
        items.append(CanonicalItem(
            title=title,
            link=link,
            description=description,
            pubDate=stamp,
            isoDate=stamp,
            author="Your Name",
            guid=link,
            category=category,
            source=source,
            feedTitle=feed_title,
        ))

    return [FeedResult(
        feedInfo=FeedInfo(
            title="Example Feed",
            description="Example RSS data",
            category="Example",
        ),
        items=items,
    )]
