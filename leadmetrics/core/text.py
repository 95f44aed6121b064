"""Text signal extraction for downstream prompt construction. No scoring."""

from collections import Counter
from datetime import datetime, timezone

from leadmetrics.core.calculators import normalized_hashtags, normalized_mentions
from leadmetrics.core.parsing import parse_timestamp
from leadmetrics.models.metrics import HashtagFrequency, MentionFrequency, TextDataForAI
from leadmetrics.models.snapshot import RawProfile

DEFAULT_RECENT_CAPTION_LIMIT = 10
DEFAULT_TOP_HASHTAG_LIMIT = 10
DEFAULT_TOP_MENTION_LIMIT = 5

_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def _unique(values) -> list[str]:
    """First-seen order, duplicates dropped."""
    return list(dict.fromkeys(values))


def _ranked(values: list[str], limit: int) -> list[tuple[str, int]]:
    # Counter preserves insertion order and sorted() is stable, so ties
    # keep first-seen order.
    counts = Counter(values)
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]


def recent_captions(profile: RawProfile, limit: int = DEFAULT_RECENT_CAPTION_LIMIT) -> list[str]:
    """Newest non-empty captions first; undated posts keep input order after dated ones."""
    indexed = list(enumerate(profile.latest_posts))
    indexed.sort(
        key=lambda item: (parse_timestamp(item[1].timestamp) or _UNDATED, -item[0]),
        reverse=True,
    )
    captions = []
    for _, post in indexed:
        caption = (post.caption or "").strip()
        if caption:
            captions.append(caption)
        if len(captions) >= limit:
            break
    return captions


def extract_text_data(
    profile: RawProfile,
    recent_caption_limit: int = DEFAULT_RECENT_CAPTION_LIMIT,
    top_hashtag_limit: int = DEFAULT_TOP_HASHTAG_LIMIT,
    top_mention_limit: int = DEFAULT_TOP_MENTION_LIMIT,
) -> TextDataForAI:
    posts = profile.latest_posts

    hashtags = [tag for post in posts for tag in normalized_hashtags(post)]
    mentions = [name for post in posts for name in normalized_mentions(post)]

    link_titles = [
        link.title.strip()
        for link in [*profile.external_urls, *profile.bio_links]
        if link.title and link.title.strip()
    ]
    locations = _unique(
        post.location_name.strip()
        for post in posts
        if post.location_name and post.location_name.strip()
    )

    return TextDataForAI(
        biography=(profile.biography or "").strip(),
        recent_captions=recent_captions(profile, recent_caption_limit),
        all_hashtags=hashtags,
        unique_hashtags=_unique(hashtags),
        hashtag_frequency=[
            HashtagFrequency(hashtag=tag, count=count)
            for tag, count in _ranked(hashtags, top_hashtag_limit)
        ],
        all_mentions=mentions,
        unique_mentions=_unique(mentions),
        top_mentions=[
            MentionFrequency(mention=name, count=count)
            for name, count in _ranked(mentions, top_mention_limit)
        ],
        external_link_titles=_unique(link_titles),
        location_names=locations,
    )
