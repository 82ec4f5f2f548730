# tabulens/utils/listing.py
"""
Derived views over the store's datasets: search, type filter, sort, totals.
Recomputed on every rerun; the input list is never modified.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..schemas.dataset import Dataset
from .formatting import parse_timestamp

SORT_OPTIONS = {
    "recent": "Newest First",
    "oldest": "Oldest First",
    "name": "Name (A-Z)",
    "size": "Largest Size",
    "rows": "Most Rows",
}

FILE_TYPE_FILTERS = {
    "all": "All",
    "csv": "CSV",
    "excel": "Excel",
}


def parse_dataset_id(value) -> Optional[int]:
    """Dataset id from a query param or session value; None when not an integer."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _uploaded_ts(d: Dataset) -> float:
    when = parse_timestamp(d.uploaded_at)
    return when.timestamp() if when else 0.0


def sort_datasets(datasets: Iterable[Dataset], sort_by: str = "recent") -> List[Dataset]:
    items = list(datasets)
    if sort_by == "recent":
        return sorted(items, key=_uploaded_ts, reverse=True)
    if sort_by == "oldest":
        return sorted(items, key=_uploaded_ts)
    if sort_by == "name":
        return sorted(items, key=lambda d: d.name.casefold())
    if sort_by == "size":
        return sorted(items, key=lambda d: d.file_size, reverse=True)
    if sort_by == "rows":
        return sorted(items, key=lambda d: d.total_rows, reverse=True)
    return items


def matches(d: Dataset, query: str = "", file_type: str = "all") -> bool:
    if not d.name:
        return False
    if query and query.lower() not in d.name.lower():
        return False
    if file_type != "all":
        return bool(d.file_type) and d.file_type.lower() == file_type.lower()
    return True


def select_datasets(
    datasets: Iterable[Dataset],
    query: str = "",
    file_type: str = "all",
    sort_by: str = "recent",
) -> List[Dataset]:
    return [d for d in sort_datasets(datasets, sort_by) if matches(d, query, file_type)]


@dataclass(frozen=True)
class DatasetSummary:
    total: int
    total_rows: int
    total_bytes: int
    last_upload: Optional[Dataset]


def summarize(datasets: Iterable[Dataset]) -> DatasetSummary:
    items = list(datasets)
    return DatasetSummary(
        total=len(items),
        total_rows=sum(d.total_rows or 0 for d in items),
        total_bytes=sum(d.file_size or 0 for d in items),
        # store order is recency order: the first entry is the latest upload
        last_upload=items[0] if items else None,
    )
