# reelview/core/extract/extractors.py
"""
Entity extractors: EntryPayload -> list[NormalizedMediaItem] | None.

Each extractor is pure and fails open: a payload it cannot handle returns
None ("not applicable"), never raises. The normalizer tries them in the
order of EXTRACTOR_CHAIN and the first non-None result wins.

Priority (highest first):
  1. imgur .gifv link          -> direct .mp4 video
  2. gfycat oembed thumbnail   -> giant.gfycat.com .mp4 video
  3. secure embed, raw HTML    -> iframe src
  4. secure embed, domain URL  -> URL as-is
  5. gallery metadata          -> one picture per gallery entry
  6. preview images            -> per image: mp4 variant, gif variant, or still
"""

from __future__ import annotations

import re
from collections.abc import Callable
from urllib.parse import urlparse, urlunparse

from bs4 import BeautifulSoup

from reelview.core.extract.urls import (
    absolute_permalink,
    decode_entities,
    gallery_source_set,
    is_http_url,
    preview_source_set,
)
from reelview.schemas.models import (
    EmbedMedia,
    EntryPayload,
    GalleryItem,
    MediaVariant,
    NormalizedMediaItem,
    PictureMedia,
    PreviewImageItem,
    SecureMediaEmbed,
    VideoMedia,
)

Extractor = Callable[[EntryPayload], list[NormalizedMediaItem] | None]

MP4_MIME = "video/mp4"

# -----------------------
# Third-party patterns
# -----------------------

_IMGUR_HOSTS = {"imgur.com", "i.imgur.com", "m.imgur.com"}
_GIFV_SUFFIX = ".gifv"

GFYCAT_TYPE = "gfycat.com"
_GFYCAT_THUMB_RE = re.compile(
    r"^https?://thumbs\.gfycat\.com/(?P<token>[^/?#]+?)-(?:size_restricted|mobile|poster|max-1mb|small)\.(?:gif|jpg|png|mp4)(?:\?.*)?$",
    re.IGNORECASE,
)
_GFYCAT_TOKEN_RE = re.compile(r"^[A-Za-z]+$")
_GFYCAT_VIDEO_TEMPLATE = "https://giant.gfycat.com/{token}.mp4"

_MARKUP_ENTITIES = (("&lt;", "<"), ("&gt;", ">"), ("&quot;", '"'), ("&#39;", "'"))


def _item(payload: EntryPayload, media: MediaVariant) -> NormalizedMediaItem:
    return NormalizedMediaItem(
        title=payload.title,
        title_url=absolute_permalink(payload.permalink),
        media=media,
    )


# -----------------------
# 1) imgur .gifv
# -----------------------


def extract_gifv_link(payload: EntryPayload) -> list[NormalizedMediaItem] | None:
    if not payload.url:
        return None
    url = decode_entities(payload.url)
    if not is_http_url(url):
        return None
    parsed = urlparse(url)
    if parsed.netloc.lower() not in _IMGUR_HOSTS:
        return None
    if not parsed.path.lower().endswith(_GIFV_SUFFIX):
        return None
    mp4_path = parsed.path[: -len(_GIFV_SUFFIX)] + ".mp4"
    if mp4_path in ("/.mp4", ".mp4"):
        return None
    mp4_url = urlunparse(parsed._replace(path=mp4_path, query="", fragment=""))
    return [_item(payload, VideoMedia(mime=MP4_MIME, url=mp4_url))]


# -----------------------
# 2) gfycat oembed
# -----------------------


def extract_oembed_video(payload: EntryPayload) -> list[NormalizedMediaItem] | None:
    media = payload.media
    if media is None or media.type != GFYCAT_TYPE or media.oembed is None:
        return None
    thumb = media.oembed.thumbnail_url
    if not thumb:
        return None
    m = _GFYCAT_THUMB_RE.match(decode_entities(thumb))
    if not m:
        return None
    token = m.group("token")
    # Derived URL must be well formed; anything else falls through.
    if not _GFYCAT_TOKEN_RE.match(token):
        return None
    return [_item(payload, VideoMedia(mime=MP4_MIME, url=_GFYCAT_VIDEO_TEMPLATE.format(token=token)))]


# -----------------------
# 3/4) secure embeds
# -----------------------


def _embed_dimensions(embed: SecureMediaEmbed) -> tuple[int, int, bool] | None:
    if embed.width is None or embed.height is None or embed.scrolling is None:
        return None
    return embed.width, embed.height, embed.scrolling


def _embed(payload: EntryPayload, url: str, dims: tuple[int, int, bool]) -> list[NormalizedMediaItem]:
    width, height, scrolling = dims
    return [
        _item(
            payload,
            EmbedMedia(url=url, width=width, height=height, scrolling="yes" if scrolling else "no"),
        )
    ]


def _unescape_markup(html_snippet: str) -> str:
    # html.parser decodes attribute values itself, so `&amp;` is left for it.
    for entity, char in _MARKUP_ENTITIES:
        html_snippet = html_snippet.replace(entity, char)
    return html_snippet


def _first_src(html_snippet: str) -> str | None:
    soup = BeautifulSoup(_unescape_markup(html_snippet), "html.parser")
    tag = soup.find(src=True)
    if tag is None:
        return None
    src = tag.get("src")
    if isinstance(src, list):  # multi-valued attrs come back as lists
        src = " ".join(src)
    return src or None


def extract_embed_html(payload: EntryPayload) -> list[NormalizedMediaItem] | None:
    embed = payload.secure_media_embed
    if embed is None or not embed.content:
        return None
    dims = _embed_dimensions(embed)
    if dims is None:
        return None
    src = _first_src(embed.content)
    if not src:
        return None
    return _embed(payload, decode_entities(src), dims)


def extract_embed_domain(payload: EntryPayload) -> list[NormalizedMediaItem] | None:
    embed = payload.secure_media_embed
    if embed is None or not embed.media_domain_url:
        return None
    dims = _embed_dimensions(embed)
    if dims is None:
        return None
    return _embed(payload, decode_entities(embed.media_domain_url), dims)


# -----------------------
# 5) gallery
# -----------------------


def _gallery_media(entry: GalleryItem) -> MediaVariant | None:
    src = entry.s
    if src is None:
        return None
    if src.u:
        return PictureMedia(url=decode_entities(src.u), source_set=gallery_source_set(entry))
    if src.mp4:
        return VideoMedia(mime=MP4_MIME, url=decode_entities(src.mp4))
    return None


def extract_gallery(payload: EntryPayload) -> list[NormalizedMediaItem] | None:
    metadata = payload.media_metadata
    if not metadata:
        return None
    items: list[NormalizedMediaItem] = []
    for entry in metadata.values():
        media = _gallery_media(entry)
        if media is not None:
            items.append(_item(payload, media))
    return items or None


# -----------------------
# 6) preview images
# -----------------------


def _preview_media(image: PreviewImageItem) -> MediaVariant:
    variants = image.variants
    if variants is not None:
        if variants.mp4 is not None:
            return VideoMedia(mime=MP4_MIME, url=decode_entities(variants.mp4.source.url))
        if variants.gif is not None:
            return PictureMedia(
                url=decode_entities(variants.gif.source.url),
                source_set=preview_source_set(variants.gif),
            )
    return PictureMedia(url=decode_entities(image.source.url), source_set=preview_source_set(image))


def extract_preview(payload: EntryPayload) -> list[NormalizedMediaItem] | None:
    preview = payload.preview
    if preview is None or not preview.images:
        return None
    return [_item(payload, _preview_media(img)) for img in preview.images]


EXTRACTOR_CHAIN: tuple[Extractor, ...] = (
    extract_gifv_link,
    extract_oembed_video,
    extract_embed_html,
    extract_embed_domain,
    extract_gallery,
    extract_preview,
)


__all__ = [
    "Extractor",
    "EXTRACTOR_CHAIN",
    "GFYCAT_TYPE",
    "MP4_MIME",
    "extract_gifv_link",
    "extract_oembed_video",
    "extract_embed_html",
    "extract_embed_domain",
    "extract_gallery",
    "extract_preview",
]
