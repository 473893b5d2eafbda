"""Refreshable API resources – boards, catalogs, thread lists, threads, archives.

Every kind follows the same lifecycle:

  • ``await Kind.new(client, ...)`` performs an unconditional GET and
    requires a 200.
  • ``await entity.refresh()`` waits out the kind's cooldown, performs a
    conditional GET and swaps in the new payload on a 200.  A 304 keeps the
    cached payload; any failure leaves the entity exactly as it was.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Iterator, TypeVar

from .errors import CooldownError, ThreadArchived, UnexpectedStatus
from .fetch import Failure, NotModified
from .models import (
    Board,
    BoardsPayload,
    CatalogPage,
    CatalogThread,
    Post,
    ThreadListPage,
    ThreadPayload,
    ThreadSummary,
)

if TYPE_CHECKING:
    from .client import ChanClient

logger = logging.getLogger("chanfetch.resources")

P = TypeVar("P")


@dataclass(frozen=True)
class ResourceMetadata:
    """Where a resource lives and the Last-Modified stamp of the payload we hold."""
    url: str
    last_modified: str | None = None


class Resource(Generic[P]):
    """Base for every refreshable resource.

    Subclasses set ``payload_model`` (anything pydantic can validate),
    ``cooldown_key`` (a field of CooldownConfig) and expose their items
    through ``_items()``.
    """

    payload_model: ClassVar[Any]
    cooldown_key: ClassVar[str]

    def __init__(self, client: ChanClient, metadata: ResourceMetadata, payload: P) -> None:
        self._client = client
        self.metadata = metadata
        self.payload = payload
        self.last_refreshed = time.monotonic()

    @classmethod
    async def _fetch_new(cls, client: ChanClient, path: str) -> tuple[ResourceMetadata, P]:
        url = client.url(path)
        outcome = await client.fetcher.fetch(url, cls.payload_model)
        if isinstance(outcome, Failure):
            raise outcome.error
        if isinstance(outcome, NotModified):
            # Nothing cached to fall back on.
            raise UnexpectedStatus(url, 304)
        logger.info("Fetched %s", url)
        return ResourceMetadata(url, outcome.last_modified), outcome.payload

    @property
    def cooldown(self) -> float:
        return self._client.cooldown(self.cooldown_key)

    # ── refresh ──────────────────────────────────────────────────

    async def _cool_down(self) -> None:
        cooldown = self.cooldown
        if cooldown <= 0:
            return
        elapsed = time.monotonic() - self.last_refreshed
        if elapsed >= cooldown:
            return
        remaining = cooldown - elapsed
        if remaining > cooldown:
            raise CooldownError(elapsed, cooldown)
        logger.debug("Refreshing %s too often, waiting %.2fs", self.metadata.url, remaining)
        await asyncio.sleep(remaining)

    async def refresh(self) -> bool:
        """Re-fetch the resource if the server has something newer.

        Returns True when the payload was replaced and False on a 304.
        Raises the fetch error otherwise, leaving payload and metadata intact.
        """
        await self._cool_down()
        outcome = await self._client.fetcher.fetch(
            self.metadata.url, self.payload_model, self.metadata.last_modified
        )
        # Failed attempts count against the cooldown too.
        self.last_refreshed = time.monotonic()

        if isinstance(outcome, Failure):
            logger.warning("Refresh of %s failed: %s", self.metadata.url, outcome.error)
            raise outcome.error
        if isinstance(outcome, NotModified):
            if outcome.last_modified is not None:
                self.metadata = replace(self.metadata, last_modified=outcome.last_modified)
            logger.debug("%s not modified", self.metadata.url)
            return False
        self._replace(outcome.payload, replace(self.metadata, last_modified=outcome.last_modified))
        logger.info("Refreshed %s", self.metadata.url)
        return True

    def _replace(self, payload: P, metadata: ResourceMetadata) -> None:
        self.payload = payload
        self.metadata = metadata

    # ── sequence view ────────────────────────────────────────────

    def _items(self) -> list[Any]:
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self._items())

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items())

    def __getitem__(self, idx: int) -> Any:
        return self._items()[idx]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.metadata.url} last_modified={self.metadata.last_modified!r}>"


class BoardList(Resource[BoardsPayload]):
    """Every board and its attributes (``boards.json``)."""

    payload_model = BoardsPayload
    cooldown_key = "boards"

    @classmethod
    async def new(cls, client: ChanClient) -> BoardList:
        metadata, payload = await cls._fetch_new(client, "/boards.json")
        return cls(client, metadata, payload)

    def _items(self) -> list[Board]:
        return self.payload.boards

    def get(self, slug: str) -> Board | None:
        for board in self.payload.boards:
            if board.board == slug:
                return board
        return None


class Catalog(Resource[list[CatalogPage]]):
    """All pages of a board's catalog, OPs plus their latest replies."""

    payload_model = list[CatalogPage]
    cooldown_key = "catalog"

    def __init__(self, client: ChanClient, metadata: ResourceMetadata, payload: list[CatalogPage], board: str) -> None:
        super().__init__(client, metadata, payload)
        self.board = board

    @classmethod
    async def new(cls, client: ChanClient, board: str) -> Catalog:
        metadata, payload = await cls._fetch_new(client, f"/{board}/catalog.json")
        return cls(client, metadata, payload, board)

    def _items(self) -> list[CatalogPage]:
        return self.payload

    def page(self, number: int) -> CatalogPage | None:
        for page in self.payload:
            if page.page == number:
                return page
        return None

    def threads(self) -> Iterator[CatalogThread]:
        for page in self.payload:
            yield from page.threads


class ThreadList(Resource[list[ThreadListPage]]):
    """Thread numbers, modification times and reply counts (``threads.json``)."""

    payload_model = list[ThreadListPage]
    cooldown_key = "threads"

    def __init__(self, client: ChanClient, metadata: ResourceMetadata, payload: list[ThreadListPage], board: str) -> None:
        super().__init__(client, metadata, payload)
        self.board = board

    @classmethod
    async def new(cls, client: ChanClient, board: str) -> ThreadList:
        metadata, payload = await cls._fetch_new(client, f"/{board}/threads.json")
        return cls(client, metadata, payload, board)

    def _items(self) -> list[ThreadListPage]:
        return self.payload

    def find(self, no: int) -> ThreadSummary | None:
        for page in self.payload:
            for summary in page.threads:
                if summary.no == no:
                    return summary
        return None

    def thread_numbers(self) -> list[int]:
        return [t.no for page in self.payload for t in page.threads]


class Thread(Resource[ThreadPayload]):
    """A thread's OP and replies.

    Once the OP reports ``archived`` the thread is frozen: it never
    un-archives, and ``refresh()`` raises ThreadArchived without touching
    the network.
    """

    payload_model = ThreadPayload
    cooldown_key = "thread"

    def __init__(self, client: ChanClient, metadata: ResourceMetadata, payload: ThreadPayload, board: str, no: int) -> None:
        super().__init__(client, metadata, payload)
        self.board = board
        self.no = no
        self._archived = False
        self._archived_on: int | None = None
        self._track_archival(payload)

    @classmethod
    async def new(cls, client: ChanClient, board: str, no: int) -> Thread:
        metadata, payload = await cls._fetch_new(client, f"/{board}/thread/{no}.json")
        return cls(client, metadata, payload, board, no)

    @property
    def archived(self) -> bool:
        return self._archived

    @property
    def archived_on(self) -> int | None:
        """UNIX timestamp of archival, when the API reported one."""
        return self._archived_on

    @property
    def op(self) -> Post:
        return self.payload.posts[0]

    @property
    def replies(self) -> list[Post]:
        return self.payload.posts[1:]

    @property
    def last_post(self) -> Post:
        return self.payload.posts[-1]

    def find(self, no: int) -> Post | None:
        for post in self.payload.posts:
            if post.no == no:
                return post
        return None

    def _items(self) -> list[Post]:
        return self.payload.posts

    def _track_archival(self, payload: ThreadPayload) -> None:
        op = payload.posts[0]
        if op.archived and not self._archived:
            self._archived = True
            self._archived_on = op.archived_on
            logger.info("Thread /%s/%d is archived", self.board, self.no)

    def _replace(self, payload: ThreadPayload, metadata: ResourceMetadata) -> None:
        super()._replace(payload, metadata)
        self._track_archival(payload)

    async def refresh(self) -> bool:
        if self._archived:
            raise ThreadArchived(self.board, self.no, self._archived_on)
        return await super().refresh()


class Archive(Resource[list[int]]):
    """Numbers of a board's archived threads (``archive.json``)."""

    payload_model = list[int]
    cooldown_key = "archive"

    def __init__(self, client: ChanClient, metadata: ResourceMetadata, payload: list[int], board: str) -> None:
        super().__init__(client, metadata, payload)
        self.board = board

    @classmethod
    async def new(cls, client: ChanClient, board: str) -> Archive:
        metadata, payload = await cls._fetch_new(client, f"/{board}/archive.json")
        return cls(client, metadata, payload, board)

    def _items(self) -> list[int]:
        return self.payload
