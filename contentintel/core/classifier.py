"""
Content classifier.

Maps free-form input plus an optional explicit hint to one of the four
content categories. Classification is a pure function of the request:
ordered pattern rules, first match wins.
"""

import re
from typing import Optional, Tuple
from urllib.parse import urlparse

from contentintel.core.models import AnalysisRequest, ContentCategory, MediaKind

AUDIO_HOSTS: Tuple[str, ...] = (
    "youtube.com",
    "youtu.be",
    "spotify.com",
    "soundcloud.com",
)
MEDIA_HOSTS: Tuple[str, ...] = (
    "instagram.com",
    "cdninstagram",
    "facebook.com",
    "fbcdn",
    "tiktok.com",
)

# Extension followed by a query string or the end of input
AUDIO_EXTENSIONS = re.compile(r"\.(mp3|wav|ogg|m4a|aac|flac)(\?|$)")
IMAGE_EXTENSIONS = re.compile(r"\.(jpg|jpeg|png|gif|webp|bmp|svg)(\?|$)")
VIDEO_EXTENSIONS = re.compile(r"\.(mp4|mov|avi|mkv|webm)(\?|$)")

_WHITESPACE = re.compile(r"\s")


def classify(request: AnalysisRequest) -> ContentCategory:
    """
    Classify a request.

    A recognized `category_hint` is authoritative. Otherwise rules apply
    to the trimmed, lower-cased content in order:

    1. audio/video hosting domain or audio file extension -> AUDIO
    2. social image/video CDN domain or image/video extension -> MEDIA
    3. absolute http(s) URL without whitespace -> TOOL
    4. anything else -> NEWS
    """
    hinted = ContentCategory.parse(request.category_hint)
    if hinted is not None:
        return hinted
    return classify_content(request.raw_content)


def classify_content(raw_content: str) -> ContentCategory:
    """Apply the ordered pattern rules to raw content."""
    text = raw_content.strip().lower()

    if any(host in text for host in AUDIO_HOSTS) or AUDIO_EXTENSIONS.search(text):
        return ContentCategory.AUDIO

    if (
        any(host in text for host in MEDIA_HOSTS)
        or IMAGE_EXTENSIONS.search(text)
        or VIDEO_EXTENSIONS.search(text)
    ):
        return ContentCategory.MEDIA

    if is_absolute_url(text):
        return ContentCategory.TOOL

    return ContentCategory.NEWS


def is_absolute_url(text: str) -> bool:
    """True for a single http(s) URL with a host and no embedded whitespace."""
    if not text or _WHITESPACE.search(text):
        return False
    parsed = urlparse(text)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def infer_media_kind(request: AnalysisRequest) -> MediaKind:
    """Media kind for the media engine: explicit kind, else video extension, else image."""
    explicit = MediaKind.parse(request.media_kind)
    if explicit is not None:
        return explicit
    if VIDEO_EXTENSIONS.search(request.raw_content.strip().lower()):
        return MediaKind.VIDEO
    return MediaKind.IMAGE


def detect_platform(raw_content: str) -> str:
    """Name the hosting platform of an audio source, for the audio engine prompt."""
    text = raw_content.lower()
    if "youtube.com" in text or "youtu.be" in text:
        return "YouTube"
    if "instagram.com" in text or "cdninstagram" in text:
        return "Instagram"
    if "facebook.com" in text or "fbcdn" in text:
        return "Facebook"
    if "tiktok.com" in text:
        return "TikTok"
    if "spotify.com" in text:
        return "Spotify"
    if "soundcloud.com" in text:
        return "SoundCloud"
    return "Direct Upload"


def engine_hint(category: ContentCategory, request: AnalysisRequest) -> Optional[str]:
    """Category-specific hint forwarded to the collaborator (media kind or platform)."""
    if category is ContentCategory.MEDIA:
        return infer_media_kind(request).value
    if category is ContentCategory.AUDIO:
        return detect_platform(request.raw_content)
    return None
