"""Payload models for the 4chan JSON API.

Integer 0/1 flags are validated into ``bool``; fields the API omits for a
given post or board default to ``None``.  Unknown keys are ignored so that
additions to the API never break parsing.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


# ── boards.json ──────────────────────────────────────────────────


class Cooldowns(_Payload):
    threads: int
    replies: int
    images: int


class Board(_Payload):
    board: str
    title: str
    ws_board: bool
    per_page: int
    pages: int
    max_filesize: int
    max_webm_filesize: int
    max_comment_chars: int
    max_webm_duration: int
    bump_limit: int
    image_limit: int
    cooldowns: Cooldowns
    meta_description: str = ""
    spoilers: bool | None = None
    custom_spoilers: int | None = None
    is_archived: bool | None = None
    board_flags: dict[str, str] | None = None
    country_flags: bool | None = None
    user_ids: bool | None = None
    oekaki: bool | None = None
    sjis_tags: bool | None = None
    code_tags: bool | None = None
    math_tags: bool | None = None
    text_only: bool | None = None
    forced_anon: bool | None = None
    webm_audio: bool | None = None
    require_subject: bool | None = None
    min_image_width: int | None = None
    min_image_height: int | None = None


class BoardsPayload(_Payload):
    boards: list[Board]


# ── posts ────────────────────────────────────────────────────────


class Post(_Payload):
    no: int
    resto: int = 0
    time: int
    now: str = ""
    name: str | None = None
    trip: str | None = None
    id: str | None = None
    capcode: str | None = None
    country: str | None = None
    country_name: str | None = None
    board_flag: str | None = None
    flag_name: str | None = None
    sub: str | None = None
    com: str | None = None
    tim: int | None = None
    filename: str | None = None
    ext: str | None = None
    fsize: int | None = None
    md5: str | None = None
    w: int | None = None
    h: int | None = None
    tn_w: int | None = None
    tn_h: int | None = None
    filedeleted: bool | None = None
    spoiler: bool | None = None
    custom_spoiler: int | None = None
    sticky: bool | None = None
    closed: bool | None = None
    replies: int | None = None
    images: int | None = None
    bumplimit: bool | None = None
    imagelimit: bool | None = None
    tag: str | None = None
    semantic_url: str | None = None
    since4pass: int | None = None
    unique_ips: int | None = None
    m_img: bool | None = None
    archived: bool | None = None
    archived_on: int | None = None

    @property
    def is_op(self) -> bool:
        return self.resto == 0

    def image_url(self, image_base: str, board: str) -> str | None:
        """Full-size attachment URL, or None for text-only posts."""
        if self.tim is None or self.ext is None:
            return None
        return f"{image_base}/{board}/{self.tim}{self.ext}"

    def thumbnail_url(self, image_base: str, board: str) -> str | None:
        if self.tim is None:
            return None
        return f"{image_base}/{board}/{self.tim}s.jpg"


class ThreadPayload(_Payload):
    posts: list[Post] = Field(min_length=1)


# ── catalog.json ─────────────────────────────────────────────────


class CatalogThread(Post):
    omitted_posts: int | None = None
    omitted_images: int | None = None
    last_modified: int | None = None
    last_replies: list[Post] | None = None


class CatalogPage(_Payload):
    page: int
    threads: list[CatalogThread]


# ── threads.json ─────────────────────────────────────────────────


class ThreadSummary(_Payload):
    no: int
    last_modified: int
    replies: int


class ThreadListPage(_Payload):
    page: int
    threads: list[ThreadSummary]
