# reelview/schemas/models.py

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =========================
# Upstream listing shapes
# =========================
#
# These mirror the subset of the listing JSON we read. Everything else the
# upstream sends is ignored. Optional fields stay optional: the presence
# pattern decides which extractor fires.


class _Upstream(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class GallerySource(_Upstream):
    """One resolution of a gallery image. `x`/`y` are width/height, `u` the URL."""

    x: int | None = None
    y: int | None = None
    u: str | None = None
    gif: str | None = None
    mp4: str | None = None


class GalleryItem(_Upstream):
    """Gallery metadata entry: primary source `s` plus alternate resolutions `p`."""

    status: str | None = None
    e: str | None = Field(None, description='Element type, e.g. "Image" or "AnimatedImage".')
    s: GallerySource | None = None
    p: list[GallerySource] = Field(default_factory=list)


class PreviewImage(_Upstream):
    url: str
    width: int
    height: int


class PreviewImageSet(_Upstream):
    """A source image with its downscaled resolutions (no nested variants)."""

    source: PreviewImage
    resolutions: list[PreviewImage] = Field(default_factory=list)


class PreviewVariants(_Upstream):
    gif: PreviewImageSet | None = None
    mp4: PreviewImageSet | None = None


class PreviewImageItem(PreviewImageSet):
    variants: PreviewVariants | None = None


class PreviewBlock(_Upstream):
    images: list[PreviewImageItem] = Field(default_factory=list)


class SecureMediaEmbed(_Upstream):
    """
    Embed block. Newer payloads carry raw iframe HTML in `content`; older ones
    carry a `media_domain_url`. Width/height/scrolling gate both shapes.
    """

    content: str | None = None
    media_domain_url: str | None = None
    width: int | None = None
    height: int | None = None
    scrolling: bool | None = None


class OEmbed(_Upstream):
    thumbnail_url: str | None = None
    provider_name: str | None = None


class ThirdPartyMedia(_Upstream):
    type: str | None = None
    oembed: OEmbed | None = None


class EntryPayload(_Upstream):
    """Payload of a link (t3) child. Title, permalink and name are always present."""

    title: str
    permalink: str
    name: str
    url: str | None = None
    media_metadata: dict[str, GalleryItem] | None = None
    preview: PreviewBlock | None = None
    secure_media_embed: SecureMediaEmbed | None = None
    media: ThirdPartyMedia | None = None


class EntryData(_Upstream):
    """
    Payload of any listing child. Only `name` is read for every kind; link
    payloads are validated as EntryPayload when they are normalized.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str | None = None

    def as_link_payload(self) -> EntryPayload:
        return EntryPayload.model_validate(self.model_dump())


class RawEntry(_Upstream):
    kind: str
    data: EntryData | None = None


class RawListingData(_Upstream):
    children: list[RawEntry] = Field(default_factory=list)
    after: str | None = None


class RawListingPage(_Upstream):
    """Top-level listing response. `data is None` means "no data", not "empty page"."""

    kind: str | None = None
    data: RawListingData | None = None


# =========================
# Normalized media items
# =========================

ScrollPolicy = Literal["yes", "no"]


class PictureMedia(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["picture"] = "picture"
    url: str = Field(..., description="Primary image URL (entities decoded).")
    source_set: str = Field(..., description='Responsive descriptor: "<url> <w>w, ...", primary last.')


class VideoMedia(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["video"] = "video"
    mime: str = Field("video/mp4", description="MIME type for the <source> element.")
    url: str


class EmbedMedia(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["embed"] = "embed"
    url: str
    width: int
    height: int
    scrolling: ScrollPolicy


MediaVariant = Annotated[PictureMedia | VideoMedia | EmbedMedia, Field(discriminator="kind")]


class NormalizedMediaItem(BaseModel):
    """
    One displayable item. Produced once by the normalizer and never mutated.
    `title_url` is the absolute permalink of the originating post.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    title_url: str
    media: MediaVariant


# =========================
# Viewer / runtime models
# =========================

ViewerPhase = Literal["idle", "loading", "failed"]


class ViewerState(BaseModel):
    """Read-only snapshot handed to renderers."""

    model_config = ConfigDict(frozen=True)

    current_index: int | None = Field(None, description="Clamped to [0, item_count-1]; None while empty.")
    item_count: int = Field(0, ge=0)
    auto_advance: bool = True
    interval_s: int = Field(10, gt=0)
    loading: bool = False
    failed: bool = False
    cursor: str | None = None

    @property
    def phase(self) -> ViewerPhase:
        if self.loading:
            return "loading"
        if self.failed:
            return "failed"
        return "idle"


class ViewerPreferences(BaseModel):
    """Persisted auto-advance preferences."""

    timeout_enabled: bool = True
    timeout_seconds: int = Field(10, gt=0)


class FetchPolicy(BaseModel):
    """
    Knobs for the HTTP fetch collaborator. The core never retries; a failed
    request is reported once and recovery is left to the user.
    """

    timeout_s: float = Field(15.0, gt=0, description="Per-request timeout in seconds.")
    user_agent: str = Field("reelview/0.1 (+slideshow)", description="User-Agent header sent upstream.")
    allow_non_200: bool = Field(False, description="When False, any non-2xx status is a transport failure.")

    @field_validator("user_agent")
    @classmethod
    def _ua_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("user_agent must not be blank")
        return v


__all__ = [
    "GallerySource",
    "GalleryItem",
    "PreviewImage",
    "PreviewImageSet",
    "PreviewVariants",
    "PreviewImageItem",
    "PreviewBlock",
    "SecureMediaEmbed",
    "OEmbed",
    "ThirdPartyMedia",
    "EntryPayload",
    "EntryData",
    "RawEntry",
    "RawListingData",
    "RawListingPage",
    "ScrollPolicy",
    "PictureMedia",
    "VideoMedia",
    "EmbedMedia",
    "MediaVariant",
    "NormalizedMediaItem",
    "ViewerPhase",
    "ViewerState",
    "ViewerPreferences",
    "FetchPolicy",
]
