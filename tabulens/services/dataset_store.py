# tabulens/services/dataset_store.py

"""
Dataset cache store
-------------------
Session-lifetime client state for "my datasets":

    datasets    ordered list, most recent upload first
    loading     a full refresh is in flight (single flight)
    error       message of the last failed refresh, or None
    last_fetch  clock value of the last successful refresh, or None

One store is created per dashboard session and handed to the pages; all
mutations go through its actions. Refreshes are served from cache for
`cache_duration` seconds unless forced. The store never raises to callers:
refresh failures land in `error` and the previous datasets are kept.

Local mutations made while a refresh is in flight are journaled and
re-applied on top of the refreshed collection, so a late response cannot
resurrect a removed dataset or drop a fresh upload.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger

from ..core.config import settings
from ..core.errors import ApiError
from ..schemas.dataset import Dataset, DatasetStatus

Mutation = Callable[[List[Dataset]], List[Dataset]]

DEFAULT_ERROR = "Failed to load datasets"


class StoreState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class StoreSnapshot:
    datasets: Tuple[Dataset, ...]
    loading: bool
    error: Optional[str]
    last_fetch: Optional[float]


# ---------------------------------------------------------
# Pure collection edits (applied now, and replayed after a refresh)
# ---------------------------------------------------------
def _prepend(dataset: Dataset) -> Mutation:
    def apply(items: List[Dataset]) -> List[Dataset]:
        return [dataset] + [d for d in items if d.id != dataset.id]
    return apply


def _patch(dataset_id: int, updates: Dict[str, Any]) -> Mutation:
    def apply(items: List[Dataset]) -> List[Dataset]:
        return [_merge(d, updates) if d.id == dataset_id else d for d in items]
    return apply


def _swap(dataset: Dataset) -> Mutation:
    def apply(items: List[Dataset]) -> List[Dataset]:
        return [dataset if d.id == dataset.id else d for d in items]
    return apply


def _drop(dataset_id: int) -> Mutation:
    def apply(items: List[Dataset]) -> List[Dataset]:
        return [d for d in items if d.id != dataset_id]
    return apply


def _merge(current: Dataset, updates: Dict[str, Any]) -> Dataset:
    updates = {k: v for k, v in updates.items() if k != "id"}
    if "status" in updates:
        new_status = DatasetStatus(updates["status"])
        if new_status.rank < current.status.rank:
            logger.warning(
                f"Ignoring status downgrade {current.status.value} -> {new_status.value} "
                f"for dataset {current.id}"
            )
            updates.pop("status")
    return Dataset.model_validate({**current.model_dump(), **updates})


def error_message(exc: Exception) -> str:
    if isinstance(exc, ApiError) and exc.message:
        return exc.message
    return DEFAULT_ERROR


class DatasetStore:
    def __init__(
        self,
        gateway,
        cache_duration: float | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.gateway = gateway
        self.cache_duration = settings.cache_duration_seconds if cache_duration is None else cache_duration
        self._clock = clock
        self._lock = RLock()

        self._datasets: List[Dataset] = []
        self._loading = False
        self._error: Optional[str] = None
        self._last_fetch: Optional[float] = None
        self._pending: List[Mutation] = []
        self._generation = 0  # bumped by clear_datasets

    # ----------------------------------------------------
    # Read side
    # ----------------------------------------------------
    @property
    def datasets(self) -> List[Dataset]:
        with self._lock:
            return list(self._datasets)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def last_fetch(self) -> Optional[float]:
        return self._last_fetch

    @property
    def state(self) -> StoreState:
        with self._lock:
            if self._loading:
                return StoreState.LOADING
            if self._error is not None:
                return StoreState.ERROR
            if self._last_fetch is None and not self._datasets:
                return StoreState.EMPTY
            return StoreState.READY

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                datasets=tuple(self._datasets),
                loading=self._loading,
                error=self._error,
                last_fetch=self._last_fetch,
            )

    def get_dataset_by_id(self, dataset_id: int) -> Optional[Dataset]:
        with self._lock:
            return next((d for d in self._datasets if d.id == dataset_id), None)

    def is_fresh(self) -> bool:
        with self._lock:
            return (
                self._last_fetch is not None
                and self._clock() - self._last_fetch < self.cache_duration
            )

    # ----------------------------------------------------
    # Refresh
    # ----------------------------------------------------
    def fetch_datasets(self, force: bool = False) -> None:
        with self._lock:
            if self._loading:
                logger.debug("Already fetching datasets")
                return
            if not force and self.is_fresh():
                logger.debug("Using cached datasets")
                return

            now = self._clock()
            generation = self._generation
            self._loading = True
            self._error = None
            self._pending = []

        try:
            data = self.gateway.list()
            fresh = (
                [d if isinstance(d, Dataset) else Dataset.model_validate(d) for d in data]
                if isinstance(data, list)
                else []
            )
        except Exception as e:
            logger.error(f"Failed to fetch datasets: {e}")
            with self._lock:
                if generation != self._generation:
                    return
                self._error = error_message(e)
                self._loading = False
                self._pending = []
            return

        with self._lock:
            if generation != self._generation:
                logger.debug("Store was cleared during refresh, discarding response")
                return
            if self._pending:
                logger.debug(f"Re-applying {len(self._pending)} local change(s) onto refreshed datasets")
            for mutation in self._pending:
                fresh = mutation(fresh)
            self._datasets = fresh
            self._last_fetch = now
            self._error = None
            self._loading = False
            self._pending = []
        logger.info(f"Loaded {len(fresh)} dataset(s)")

    # ----------------------------------------------------
    # Optimistic local mutations
    # ----------------------------------------------------
    def _apply(self, mutation: Mutation) -> None:
        with self._lock:
            self._datasets = mutation(self._datasets)
            if self._loading:
                self._pending.append(mutation)

    def add_dataset(self, dataset: Dataset) -> None:
        self._apply(_prepend(dataset))

    def update_dataset(self, dataset_id: int, updates: Dict[str, Any]) -> None:
        self._apply(_patch(dataset_id, updates))

    def replace_dataset(self, dataset: Dataset) -> None:
        """Overwrite an entry with the backend's copy, status included."""
        self._apply(_swap(dataset))

    def remove_dataset(self, dataset_id: int) -> None:
        self._apply(_drop(dataset_id))

    def clear_datasets(self) -> None:
        with self._lock:
            self._generation += 1
            self._datasets = []
            self._loading = False
            self._error = None
            self._last_fetch = None
            self._pending = []
