"""
Cursor-driven page streaming.

A :class:`Paginator` turns one "list X" call into an asyncio producer task
that walks Asana's ``next_page`` cursors and hands each decoded page to the
consumer through a single-slot queue. The producer does not fetch page N+1
until page N has been taken off the queue, and stops for good after the
first page that carries an error.

Typical use::

    stream = list_my_tasks(client)
    async with stream:
        async for page in stream:
            if page.error:
                raise page.error
            for task in page.items:
                ...
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Generic,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

import httpx
from pydantic import BaseModel

from .envelope import data_list, decode_records, next_page_of, parse_json
from .errors import AsanaClientError
from .models import NextPage
from .observability import log_event

T = TypeVar("T", bound=BaseModel)

Fetch = Callable[[str], Awaitable[bytes]]

_END = object()

log = logging.getLogger("asana_client.pagination")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Tuple[T, ...] = ()
    error: Optional[Exception] = None
    next_page: Optional[NextPage] = None

    @classmethod
    def failed(cls, error: Exception) -> "Page[T]":
        return cls(error=error)

    @property
    def has_next(self) -> bool:
        # An error always ends the stream, whatever the cursor says.
        if self.error is not None or self.next_page is None:
            return False
        return self.next_page.has_path

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class PaginationRequest:
    """Path plus query for the first fetch of a run."""

    path: str
    params: Tuple[Tuple[str, str], ...] = field(default=())

    @classmethod
    def build(
        cls, path: str, params: Optional[Mapping[str, Any]] = None
    ) -> "PaginationRequest":
        pairs = tuple(
            (str(k), str(v)) for k, v in (params or {}).items() if v is not None
        )
        return cls(path=path, params=pairs)

    @property
    def target(self) -> str:
        if not self.params:
            return self.path
        return f"{self.path}?{httpx.QueryParams(list(self.params))}"


def decode_page(body: bytes, model: Type[T]) -> Page[T]:
    """
    Decode one collection response into a Page. Never raises: a structural
    failure comes back as a page whose ``error`` is set, holding whatever
    records decoded before the failure.
    """
    try:
        payload = parse_json(body)
        elements = data_list(payload)
    except AsanaClientError as exc:
        return Page(error=exc)

    records, error = decode_records(elements, model)
    if error is not None:
        return Page(items=tuple(records), error=error)

    try:
        cursor = next_page_of(payload)
    except AsanaClientError as exc:
        return Page(items=tuple(records), error=exc)
    return Page(items=tuple(records), next_page=cursor)


class PageStream(AsyncIterator[Page[T]]):
    """
    Consumer side of one pagination run.

    Iterate with ``async for``; call :meth:`cancel` to ask the producer to
    stop before its next fetch. Use ``async with`` (or :meth:`aclose`) to
    make sure the producer task is torn down.
    """

    def __init__(
        self,
        request: PaginationRequest,
        fetch: Fetch,
        decode: Callable[[bytes], Page[T]],
        *,
        resource: Optional[str] = None,
    ) -> None:
        self.request = request
        self.resource = resource
        self._fetch = fetch
        self._decode = decode
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._cancelled = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._finished = False
        self._exhausted = False

    # --- lifecycle ---

    def start(self) -> "PageStream[T]":
        """Spawn the producer; deferred to first iteration without a running loop."""
        if self._task is not None:
            return self
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return self
        self._task = loop.create_task(self._produce())
        return self

    def cancel(self) -> None:
        """Request cooperative cancellation; a fetch in flight is not interrupted."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        return self._exhausted

    async def aclose(self) -> None:
        self.cancel()
        self._exhausted = True
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "PageStream[T]":
        return self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --- consumer ---

    def __aiter__(self) -> "PageStream[T]":
        return self

    async def __anext__(self) -> Page[T]:
        if self._exhausted:
            raise StopAsyncIteration
        self.start()
        if self._finished and self._queue.empty():
            self._exhausted = True
            raise StopAsyncIteration

        item = await self._queue.get()
        self._queue.task_done()
        if item is _END:
            self._exhausted = True
            raise StopAsyncIteration
        return item

    async def collect(self) -> List[Page[T]]:
        """Drain the stream into a list of pages."""
        return [page async for page in self]

    async def items(self) -> AsyncIterator[T]:
        """Yield records across pages, raising the first page error seen."""
        async for page in self:
            for record in page.items:
                yield record
            if page.error is not None:
                raise page.error

    # --- producer ---

    async def _produce(self) -> None:
        target = self.request.target
        count = 0
        log_event("pagination.start", log, resource=self.resource, path=target)
        try:
            while True:
                if self._cancelled.is_set():
                    log_event(
                        "pagination.cancelled", log, resource=self.resource, page=count
                    )
                    return

                try:
                    body = await self._fetch(target)
                except Exception as exc:
                    await self._emit_error(exc, count + 1)
                    return

                try:
                    page = self._decode(body)
                except Exception as exc:
                    await self._emit_error(exc, count + 1)
                    return
                count += 1
                if page.error is not None:
                    await self._emit_error(page.error, count, page)
                    return

                log_event(
                    "pagination.page",
                    log,
                    level=logging.DEBUG,
                    resource=self.resource,
                    page=count,
                    records=len(page.items),
                )
                await self._emit(page)

                if not page.has_next:
                    log_event("pagination.end", log, resource=self.resource, page=count)
                    return
                target = page.next_page.path
        finally:
            self._finish()

    async def _emit_error(
        self, exc: Exception, count: int, page: Optional[Page[T]] = None
    ) -> None:
        log_event(
            "pagination.error",
            log,
            level=logging.WARNING,
            resource=self.resource,
            page=count,
            error_type=type(exc).__name__,
        )
        await self._emit(page if page is not None else Page.failed(exc))

    async def _emit(self, page: Page[T]) -> None:
        """Hand off one page and wait until it is accepted (or cancellation)."""
        await self._queue.put(page)
        accepted = asyncio.ensure_future(self._queue.join())
        cancelled = asyncio.ensure_future(self._cancelled.wait())
        try:
            await asyncio.wait(
                {accepted, cancelled}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            accepted.cancel()
            cancelled.cancel()

    def _finish(self) -> None:
        self._finished = True
        try:
            self._queue.put_nowait(_END)
        except asyncio.QueueFull:
            # A page is still waiting to be taken; the consumer sees
            # _finished once the queue drains.
            pass


class Paginator(Generic[T]):
    """
    Generic pagination engine: one instance per record type, one
    :class:`PageStream` (and producer task) per :meth:`paginate` call.
    """

    def __init__(
        self,
        fetch: Fetch,
        model: Type[T],
        *,
        resource: Optional[str] = None,
        decode: Optional[Callable[[bytes], Page[T]]] = None,
    ) -> None:
        self._fetch = fetch
        self.model = model
        self.resource = resource
        self._decode = decode or (lambda body: decode_page(body, model))

    def paginate(self, request: PaginationRequest) -> PageStream[T]:
        return PageStream(
            request, self._fetch, self._decode, resource=self.resource
        ).start()


__all__ = [
    "Page",
    "PaginationRequest",
    "PageStream",
    "Paginator",
    "decode_page",
]
