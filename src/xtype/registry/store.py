# topmark:header:start
#
#   project      : xType
#   file         : store.py
#   file_relpath : src/xtype/registry/store.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""The registry store: owner of the file type catalog.

`RegistryStore` holds the full catalog and the filtered view, restores and
persists them, and applies handler reassignments. It is the only component
that mutates catalog state.

Threading model:
    * Every public method is called from a single *owner* context (the thread
      that created the store, typically the CLI or UI thread).
    * Expensive work (discovery, full handler refresh) runs on a one-thread
      worker pool. Worker functions are pure: they read OS metadata and return
      a new catalog; they never touch store state.
    * Finished work is handed back through a queue of `TaskResult` values and
      applied by the owner in `process_results` / `wait_until_idle`, which
      both funnel into one mutation entry point (`_apply`).

Refresh versus concurrent edits:
    A refresh computes its result from a snapshot taken when it starts. Handler
    edits made by the owner while that refresh is in flight are journaled with
    a revision number and replayed on top of the refreshed catalog when it is
    published, so the edit is not lost.

Example:
    ```python
    with RegistryStore(metadata=meta, handlers=handlers, state_file=slot) as store:
        store.load()
        store.wait_until_idle()
        store.set_filter("mp3", None)
        for descriptor in store.filtered:
            print(descriptor.description, descriptor.default_handler_name)
    ```
"""

from __future__ import annotations

import queue
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from xtype.config.logging import XtypeLogger, get_logger
from xtype.core.errors import BindingError, CatalogDecodeError
from xtype.filetypes.classifier import Classifier
from xtype.filetypes.discovery import CatalogBuilder
from xtype.filetypes.model import Handler
from xtype.filetypes.resolver import HandlerResolver
from xtype.registry.filtering import filter_catalog
from xtype.registry.status import StatusChannel

if TYPE_CHECKING:
    from collections.abc import Iterable
    from concurrent.futures import Executor
    from types import TracebackType

    from xtype.filetypes.model import Category, TypeDescriptor
    from xtype.filetypes.services import DefaultHandlerService, TypeMetadataService
    from xtype.registry.persistence import CatalogStateFile

logger: XtypeLogger = get_logger(__name__)


class LoadState(Enum):
    """Loading status of the store: ``idle → loading → idle``."""

    IDLE = "idle"
    LOADING = "loading"


class TaskKind(Enum):
    """Kind of worker task, deciding how its result is published."""

    DISCOVER = "discover"  # first population from an empty slot
    REBUILD = "rebuild"  # discovery after an explicit reset
    REFRESH = "refresh"  # handler re-resolution of the current membership


@dataclass(frozen=True)
class TaskResult:
    """Value handed from the worker back to the owner context.

    Attributes:
        kind (TaskKind): What produced the result.
        base_revision (int): Store revision when the task was submitted.
        catalog (list[TypeDescriptor] | None): Computed catalog on success.
        error (BaseException | None): Exception raised by the task, if any.
    """

    kind: TaskKind
    base_revision: int
    catalog: list[TypeDescriptor] | None = None
    error: BaseException | None = None


@dataclass(frozen=True)
class _HandlerEdit:
    revision: int
    type_ids: frozenset[str]
    handler: Handler


class RegistryStore:
    """Owns the catalog, its filtered view, persistence and mutations.

    Args:
        metadata (TypeMetadataService): OS type metadata collaborator.
        handlers (DefaultHandlerService): OS default handler collaborator.
        state_file (CatalogStateFile): Persisted catalog slot.
        status (StatusChannel | None): Status channel; a default one is created if omitted.
        resolver (HandlerResolver | None): Shared resolver; built from the services if omitted.
        builder (CatalogBuilder | None): Discovery; built from the resolver if omitted.
        classifier (Classifier | None): Category function; built from ``metadata`` if omitted.
        executor (Executor | None): Worker pool. When omitted the store creates
            (and later shuts down) a single-thread pool.
    """

    def __init__(
        self,
        *,
        metadata: TypeMetadataService,
        handlers: DefaultHandlerService,
        state_file: CatalogStateFile,
        status: StatusChannel | None = None,
        resolver: HandlerResolver | None = None,
        builder: CatalogBuilder | None = None,
        classifier: Classifier | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._metadata = metadata
        self._handlers = handlers
        self._state_file = state_file
        self.status: StatusChannel = status or StatusChannel()
        self.resolver: HandlerResolver = resolver or HandlerResolver(metadata, handlers)
        self.builder: CatalogBuilder = builder or CatalogBuilder(metadata, self.resolver)
        self.classifier: Classifier = classifier or Classifier(metadata)

        self._owns_executor = executor is None
        self._executor: Executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="xtype-worker"
        )
        self._results: queue.SimpleQueue[TaskResult] = queue.SimpleQueue()

        self._catalog: list[TypeDescriptor] = []
        self._filtered: list[TypeDescriptor] = []
        self._search_text: str = ""
        self._category: Category | None = None
        self._state: LoadState = LoadState.IDLE
        self._pending: int = 0
        self._refreshes_in_flight: int = 0
        self._revision: int = 0
        self._journal: list[_HandlerEdit] = []

    # ------------------------------------------------------------------ views

    @property
    def catalog(self) -> tuple[TypeDescriptor, ...]:
        """The full catalog, in display order."""
        return tuple(self._catalog)

    @property
    def filtered(self) -> tuple[TypeDescriptor, ...]:
        """Entries matching the active search text and category."""
        return tuple(self._filtered)

    @property
    def search_text(self) -> str:
        """Active search text."""
        return self._search_text

    @property
    def category(self) -> Category | None:
        """Active category filter (``None`` means all categories)."""
        return self._category

    @property
    def state(self) -> LoadState:
        """Current loading state."""
        return self._state

    @property
    def is_loading(self) -> bool:
        """True while discovery or a refresh is in flight."""
        return self._state is LoadState.LOADING

    @property
    def status_message(self) -> str | None:
        """Visible status message, if any."""
        return self.status.message

    @property
    def revision(self) -> int:
        """Counter bumped by every handler edit."""
        return self._revision

    def get(self, type_id: str) -> TypeDescriptor | None:
        """Return the catalog entry with ``type_id``, if present."""
        index = self._index_of(self._catalog, type_id)
        return self._catalog[index] if index is not None else None

    def classify(self, descriptor: TypeDescriptor) -> Category:
        """Category of ``descriptor`` under the current classification rules."""
        return self.classifier.classify(descriptor)

    # ------------------------------------------------------------- operations

    def load(self) -> None:
        """Restore the persisted catalog, or start discovery if there is none.

        A persisted catalog that cannot be decoded is discarded and the store
        falls back to `reset`.
        """
        self._state = LoadState.LOADING
        try:
            persisted = self._state_file.read()
        except CatalogDecodeError as exc:
            logger.warning("Discarding corrupt catalog %s: %s", self._state_file, exc)
            self.reset()
            return

        if persisted is not None:
            logger.debug("Restored %d file types from %s", len(persisted), self._state_file)
            self._install(persisted)
            self._leave_loading()
            return

        logger.debug("No persisted catalog; starting discovery")
        self._submit(TaskKind.DISCOVER, self.builder.discover)

    def reset(self) -> None:
        """Delete persisted state, clear the catalog and rediscover."""
        logger.info("Resetting catalog")
        self._state_file.clear()
        self._catalog = []
        self._filtered = []
        self._submit(TaskKind.REBUILD, self.builder.discover)

    def refresh(self) -> None:
        """Re-resolve the default handler of every entry, off the owner context."""
        snapshot: list[TypeDescriptor] = list(self._catalog)
        resolver = self.resolver

        def _refresh_all() -> list[TypeDescriptor]:
            return [resolver.refresh(descriptor) for descriptor in snapshot]

        self._refreshes_in_flight += 1
        self._submit(TaskKind.REFRESH, _refresh_all)

    def set_filter(self, search_text: str = "", category: Category | None = None) -> None:
        """Set the search text and category filter and recompute the filtered view."""
        self._search_text = search_text
        self._category = category
        self._refilter()

    def set_handler(self, type_id: str, application: Path | str) -> TypeDescriptor | None:
        """Make ``application`` the default handler of one file type.

        Unknown ids are ignored: the caller may hold a stale reference.

        Args:
            type_id (str): Id of the catalog entry.
            application (Path | str): Location of the application.

        Returns:
            TypeDescriptor | None: The updated entry, or ``None`` if ``type_id``
            is not in the catalog.
        """
        index = self._index_of(self._catalog, type_id)
        if index is None:
            logger.debug("set_handler: %s is not in the catalog; ignoring", type_id)
            return None

        location = self._normalize_location(application)
        handler = Handler.for_location(location)
        updated = self._catalog[index].with_handler(handler)
        self._catalog[index] = updated

        filtered_index = self._index_of(self._filtered, type_id)
        if filtered_index is not None:
            self._filtered[filtered_index] = self._filtered[filtered_index].with_handler(handler)

        self._bind(updated, location)
        self._record_edit((type_id,), handler)
        self._persist()
        self.status.publish(
            f"{handler.name} is now the default application for {updated.description}"
        )
        return updated

    def set_category_handler(self, category: Category, application: Path | str) -> int:
        """Make ``application`` the default handler of every type in ``category``.

        Args:
            category (Category): Category selecting the entries to update.
            application (Path | str): Location of the application.

        Returns:
            int: Number of catalog entries updated.
        """
        location = self._normalize_location(application)
        handler = Handler.for_location(location)
        updated_ids: list[str] = []
        for index, descriptor in enumerate(self._catalog):
            if self.classifier.classify(descriptor) != category:
                continue
            updated = descriptor.with_handler(handler)
            self._catalog[index] = updated
            self._bind(updated, location)
            updated_ids.append(updated.id)

        self._refilter()
        self._record_edit(updated_ids, handler)
        self._persist()
        count = len(updated_ids)
        noun = "type" if count == 1 else "types"
        self.status.publish(
            f"{handler.name} is now the default application for "
            f"{count} {category.label.lower()} file {noun}"
        )
        return count

    # ------------------------------------------------------ owner-side plumbing

    def process_results(self) -> int:
        """Apply every finished worker result without blocking.

        Returns:
            int: Number of results applied.
        """
        applied = 0
        while True:
            try:
                result = self._results.get_nowait()
            except queue.Empty:
                return applied
            self._apply(result)
            applied += 1

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block the owner context until all submitted work has been published.

        Args:
            timeout (float | None): Maximum number of seconds to wait; ``None``
                waits indefinitely.

        Returns:
            bool: True if the store is idle, False if the timeout expired first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while self._pending:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                result = self._results.get(timeout=remaining)
            except queue.Empty:
                return False
            self._apply(result)
        self.process_results()
        return True

    def close(self) -> None:
        """Shut down the worker pool created by this store."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> RegistryStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ---------------------------------------------------------------- internal

    def _submit(self, kind: TaskKind, work: Callable[[], list[TypeDescriptor]]) -> None:
        self._state = LoadState.LOADING
        self._pending += 1
        base_revision = self._revision
        future: Future[list[TypeDescriptor]] = self._executor.submit(work)

        def _hand_back(done: Future[list[TypeDescriptor]]) -> None:
            error = done.exception()
            if error is not None:
                self._results.put(TaskResult(kind, base_revision, error=error))
            else:
                self._results.put(TaskResult(kind, base_revision, catalog=done.result()))

        future.add_done_callback(_hand_back)
        logger.debug("Submitted %s task at revision %d", kind.value, base_revision)

    def _apply(self, result: TaskResult) -> None:
        """Single entry point through which worker results mutate the store."""
        self._pending -= 1
        if result.kind is TaskKind.REFRESH:
            self._refreshes_in_flight -= 1

        if result.error is not None or result.catalog is None:
            logger.error(
                "%s task failed; keeping the current catalog",
                result.kind.value,
                exc_info=result.error,
            )
        else:
            catalog = list(result.catalog)
            if result.kind is TaskKind.REFRESH:
                catalog = self._replay_edits(catalog, result.base_revision)
            self._install(catalog)
            self._persist()
            if result.kind is TaskKind.REFRESH:
                self.status.publish("Default applications refreshed")
            elif result.kind is TaskKind.REBUILD:
                self.status.publish(f"Catalog rebuilt with {len(catalog)} file types")

        if self._refreshes_in_flight == 0:
            self._journal.clear()
        self._leave_loading()

    def _leave_loading(self) -> None:
        if self._pending == 0:
            self._state = LoadState.IDLE

    def _install(self, catalog: Iterable[TypeDescriptor]) -> None:
        self._catalog = list(catalog)
        self._refilter()

    def _refilter(self) -> None:
        self._filtered = filter_catalog(
            self._catalog, self._search_text, self._category, self.classifier.classify
        )

    def _persist(self) -> None:
        self._state_file.write(self._catalog)

    def _record_edit(self, type_ids: Iterable[str], handler: Handler) -> None:
        self._revision += 1
        if self._refreshes_in_flight:
            self._journal.append(_HandlerEdit(self._revision, frozenset(type_ids), handler))

    def _replay_edits(
        self, catalog: list[TypeDescriptor], base_revision: int
    ) -> list[TypeDescriptor]:
        edits = [edit for edit in self._journal if edit.revision > base_revision]
        if not edits:
            return catalog
        positions = {descriptor.id: i for i, descriptor in enumerate(catalog)}
        for edit in edits:
            for type_id in edit.type_ids:
                i = positions.get(type_id)
                if i is not None:
                    catalog[i] = catalog[i].with_handler(edit.handler)
        logger.debug("Replayed %d handler edit(s) made during refresh", len(edits))
        return catalog

    def _bind(self, descriptor: TypeDescriptor, location: Path) -> int:
        """Bind every stable type of ``descriptor``'s extensions to ``location``.

        Best effort: a failing lookup or binding is logged and skipped, the
        remaining extensions are still bound.

        Returns:
            int: Number of successful bindings.
        """
        try:
            identity = self._handlers.identity_for_application(location)
        except Exception as exc:
            logger.warning("Cannot identify application %s: %s", location, exc)
            return 0
        if not identity:
            logger.warning(
                "%s is not an installed application; not binding %s", location, descriptor.id
            )
            return 0

        bound = 0
        seen: set[str] = set()
        for ext in descriptor.extensions:
            try:
                os_type = self._metadata.type_for_extension(ext)
            except Exception as exc:
                logger.warning("Cannot look up .%s: %s", ext, exc)
                continue
            if os_type is None or not os_type.is_stable or os_type.identifier in seen:
                continue
            seen.add(os_type.identifier)
            try:
                self._handlers.set_default_handler(os_type.identifier, identity)
            except (BindingError, OSError) as exc:
                logger.warning("Binding .%s failed: %s", ext, exc)
                continue
            bound += 1
        logger.debug("Bound %d type(s) of %s to %s", bound, descriptor.id, identity)
        return bound

    @staticmethod
    def _index_of(items: list[TypeDescriptor], type_id: str) -> int | None:
        for index, descriptor in enumerate(items):
            if descriptor.id == type_id:
                return index
        return None

    @staticmethod
    def _normalize_location(application: Path | str) -> Path:
        location = Path(application).expanduser()
        return location if location.is_absolute() else location.absolute()
