import random
import shutil
import time
from pathlib import Path
from typing import Any, Dict

from fastapi import UploadFile
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import ParseError, StoreError, ValidationError
from ..core.logger import get_logger
from .dataset_service import save_dataset
from .sheet_parser import parse_first_sheet

logger = get_logger(__name__)


def is_allowed_extension(filename: str) -> bool:
    return Path(filename).suffix.lower() in settings.ALLOWED_EXTENSIONS


def build_stored_name(original_name: str) -> str:
    """
    Collision-safe name for the file on disk:
    <epoch ms>-<random suffix><original extension>
    """
    unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return unique + Path(original_name).suffix.lower()


def save_uploaded_file(upload_file: UploadFile, dest_dir: Path) -> Path:
    """
    Save an uploaded file (FastAPI UploadFile) to dest_dir with a unique name.
    Returns the full path.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest_path = dest_dir / build_stored_name(upload_file.filename or "")

    with dest_path.open("wb") as f:
        shutil.copyfileobj(upload_file.file, f)

    return dest_path


def ingest_upload(db: Session, upload_file: UploadFile, upload_dir: Path) -> Dict[str, Any]:
    """
    Full upload flow:
        1. Reject anything that is not an Excel workbook (nothing written)
        2. Save the file under a unique name
        3. Parse the first sheet into records
        4. Create the dataset + records in one transaction

    On a parse or save failure the stored file is removed and no dataset
    row exists afterwards.
    """
    original_name = upload_file.filename or ""
    if not is_allowed_extension(original_name):
        allowed = " or ".join(settings.ALLOWED_EXTENSIONS)
        raise ValidationError(f"Only {allowed} files are allowed")

    stored_path = save_uploaded_file(upload_file, Path(upload_dir))

    try:
        parsed = parse_first_sheet(stored_path)
        ds, rows_saved = save_dataset(db, stored_path.name, original_name, parsed.records)
    except (ParseError, StoreError):
        stored_path.unlink(missing_ok=True)
        raise

    logger.info(
        "Uploaded %s as dataset %s: %d rows from sheet '%s'",
        original_name, ds.id, rows_saved, parsed.sheet_name,
    )

    return {
        "message": "Upload successful",
        "dataset_id": ds.id,
        "rows_saved": rows_saved,
        "sheet_name": parsed.sheet_name,
    }
