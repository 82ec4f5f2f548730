# tabulens/schemas/dataset.py
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .base import APIModel


class DatasetStatus(str, Enum):
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def rank(self) -> int:
        # PROCESSING can move to either terminal state, never back
        return 0 if self is DatasetStatus.PROCESSING else 1


class ColumnType(str, Enum):
    NUMERIC = "NUMERIC"
    TEXT = "TEXT"
    DATE = "DATE"
    BOOLEAN = "BOOLEAN"


class Dataset(APIModel):
    id: int
    name: str
    file_path: Optional[str] = None
    file_type: Optional[str] = None      # "CSV" | "EXCEL"
    file_size: int = 0                   # bytes
    total_rows: int = 0
    total_columns: int = 0
    status: DatasetStatus = DatasetStatus.PROCESSING
    uploaded_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DatasetColumn(APIModel):
    id: Optional[int] = None
    dataset_id: Optional[int] = None
    column_name: str
    column_index: int
    data_type: ColumnType
    unique_values: int = 0
    null_count: int = 0

    # numeric columns only
    mean: Optional[float] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    @property
    def is_numeric(self) -> bool:
        return self.data_type is ColumnType.NUMERIC


class DownloadLink(APIModel):
    download_url: str
    filename: str


Scalar = Union[str, int, float, bool, None]
PreviewRow = Dict[str, Scalar]


def preview_columns(rows: List[Dict[str, Any]]) -> List[str]:
    """Column order for a preview, taken from the key set of the first row."""
    if not rows:
        return []
    return list(rows[0].keys())
