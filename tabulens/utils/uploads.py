# tabulens/utils/uploads.py
import os
from typing import List, Optional

from ..core.config import settings
from ..core.errors import UploadRejectedError

EXCEL_EXTENSIONS = {".xls", ".xlsx"}


def file_type_for(file_name: str) -> str:
    ext = os.path.splitext(file_name)[1].lower()
    return "EXCEL" if ext in EXCEL_EXTENSIONS else "CSV"


def check_upload(
    file_name: str,
    size: int,
    max_mb: Optional[int] = None,
    allowed: Optional[List[str]] = None,
) -> None:
    """Refuse a file before any network call. Raises UploadRejectedError."""
    allowed = allowed or settings.allowed_extension_list()
    max_mb = max_mb or settings.max_upload_mb

    ext = os.path.splitext(file_name)[1].lower()
    if ext not in allowed:
        raise UploadRejectedError(
            f"File type {ext or '(none)'} is not supported. Allowed: {', '.join(allowed)}"
        )
    if size <= 0:
        raise UploadRejectedError("File is empty")
    if size > max_mb * 1024 * 1024:
        raise UploadRejectedError(f"File is larger than {max_mb}MB")
