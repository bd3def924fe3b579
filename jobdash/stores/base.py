"""
JobDash - Generic resource store.

A store mirrors one server-owned resource (a collection or a singleton)
in memory, with `loading` / `error` status and async operations that call
the API and then update the cache from the confirmed server response.

Rules every store follows:
- The cache only ever holds last-confirmed server state. A failed call
  leaves it untouched.
- Operations on one store are serialized by a lock; different stores run
  concurrently and share nothing but the session token.
- `reset()` (sign-out, sign-in as someone else) bumps a generation counter.
  A response that lands after a reset is dropped instead of repopulating
  a cache that now belongs to a different session.
- A 401 on any call expires the session and leaves a distinct
  "session expired" error on the store.
"""
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union
import asyncio
import logging

from pydantic import BaseModel, ValidationError

from ..api import ApiClient
from ..errors import InputValidationError, JobDashError, NotFoundError, SessionExpiredError, TransportError
from ..services.notifications import Notifier

M = TypeVar("M", bound=BaseModel)
R = TypeVar("R")


def parse_response(model_cls: Type[M], data: Any, message: str = "Invalid response from server") -> M:
    """Validate a server payload; a malformed body is a transport-level failure."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise TransportError(message) from e


def parse_response_list(model_cls: Type[M], data: Any, message: str = "Invalid response from server") -> List[M]:
    if not isinstance(data, list):
        raise TransportError(message)
    return [parse_response(model_cls, item, message) for item in data]


def build_input(model_cls: Type[M], fields: Union[M, Dict[str, Any], None]) -> M:
    """Validate user input before any request is made."""
    if isinstance(fields, model_cls):
        return fields
    try:
        return model_cls.model_validate(fields or {})
    except ValidationError as e:
        raise InputValidationError.from_pydantic(e) from e


class ResourceStore(Generic[R]):
    """
    Base for every resource store.

    Subclasses provide `_initial()` (the empty cache) and their operations,
    each built on `_execute()`.
    """

    #: Name used in log lines
    name = "resource"
    #: Fetch automatically when a session starts
    autoload = False

    def __init__(self, api: ApiClient, session, notifier: Optional[Notifier] = None):
        self.api = api
        self.session = session
        self.notifier = notifier or Notifier()
        self.logger = logging.getLogger(f"jobdash.stores.{self.name}")
        self.cache: R = self._initial()
        self.loading = False
        self.error: Optional[str] = None
        self._lock = asyncio.Lock()
        self._generation = 0
        session.subscribe(self)

    def _initial(self) -> R:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Session listener
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Drop everything cached for the current session."""
        self._generation += 1
        self.cache = self._initial()
        self.loading = False
        self.error = None

    async def on_authenticated(self) -> None:
        self.reset()
        if self.autoload:
            await self.refresh()

    async def refresh(self) -> Any:
        """Reload the cache from the server. Overridden by stores that can list."""
        return None

    # -------------------------------------------------------------------------
    # Operation runner
    # -------------------------------------------------------------------------

    async def _execute(
        self,
        request: Callable[[str], Awaitable[Any]],
        parse: Callable[[Any], Any],
        apply: Optional[Callable[[Any], None]] = None,
        *,
        error_title: str,
        success: Optional[Callable[[Any], Tuple[str, str]]] = None,
    ) -> Any:
        """
        Run one API operation with lock, status and error bookkeeping.

        Args:
            request: Coroutine factory taking the bearer token, returning raw JSON
            parse: Turns raw JSON into the operation's result
            apply: Updates the cache from the result; skipped if the
                store was reset while the request was in flight
            error_title: Notification title on failure
            success: Builds the (title, description) notification from the
                result; only sent when the result was applied

        Returns:
            The parsed result

        Raises:
            JobDashError subclasses; the cache is unchanged on failure
        """
        async with self._lock:
            generation = self._generation
            self.loading = True
            self.error = None
            try:
                token = self.session.require_token()
                result = parse(await request(token))
            except SessionExpiredError as e:
                if generation == self._generation:
                    self.session.expire()
                    self.error = e.message
                raise
            except JobDashError as e:
                if generation == self._generation:
                    self.error = e.message
                    self.notifier.error(error_title, e.message)
                self.logger.error(f"{error_title}: {e.message}")
                raise
            finally:
                if generation == self._generation:
                    self.loading = False

            if generation != self._generation:
                self.logger.debug("Discarding response that arrived after a session reset")
                return result
            if apply is not None:
                apply(result)
            if success is not None:
                self.notifier.success(*success(result))
            return result


class CollectionStore(ResourceStore[List[M]]):
    """Resource store whose cache is a list of server entities with ids."""

    model: Type[M]
    #: Collection endpoint, e.g. "/jobs"
    path = ""
    list_error = "Failed to load data"
    #: Message used when an id is not in the cache
    not_found_message = "Not found"

    def _initial(self) -> List[M]:
        return []

    @property
    def items(self) -> List[M]:
        return self.cache

    def get_by_id(self, item_id: str) -> Optional[M]:
        """Local lookup; never touches the network."""
        for item in self.cache:
            if item.id == item_id:
                return item
        return None

    async def _require_cached(self, item_id: str, error_title: str) -> M:
        """Cached entry for `item_id`, or NotFoundError without any request."""
        async with self._lock:
            item = self.get_by_id(item_id)
            if item is None:
                error = NotFoundError(self.not_found_message, status_code=None)
                self.error = error.message
                self.notifier.error(error_title, error.message)
                self.logger.error(f"{error_title}: {item_id} is not cached")
                raise error
            return item

    def _set_all(self, items: List[M]) -> None:
        self.cache = list(items)

    def _upsert(self, item: M) -> None:
        """Replace the entry with the same id, or append it."""
        for index, existing in enumerate(self.cache):
            if existing.id == item.id:
                self.cache = self.cache[:index] + [item] + self.cache[index + 1:]
                return
        self.cache = self.cache + [item]

    def _discard(self, item_id: str) -> None:
        self.cache = [item for item in self.cache if item.id != item_id]

    def _parse_one(self, data: Any) -> M:
        return parse_response(self.model, data)

    def _parse_many(self, data: Any) -> List[M]:
        return parse_response_list(self.model, data)

    async def list(self) -> List[M]:
        return await self._execute(
            lambda token: self.api.get(self.path, token=token, default_message=self.list_error),
            self._parse_many,
            self._set_all,
            error_title="Error loading data",
        )

    async def refresh(self) -> List[M]:
        return await self.list()
