# sheetdesk/api/routes_datasets.py

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, HTTPException
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.db import get_db
from ..core.errors import SheetDeskError, ValidationError
from ..core.logger import get_logger
from ..services.dataset_service import delete_dataset, get_records, list_datasets
from ..services.ingestion_service import ingest_upload

logger = get_logger(__name__)

router = APIRouter(tags=["datasets"])

# Largest id an INTEGER primary key can hold
MAX_DATASET_ID = 2**63 - 1


def parse_dataset_id(raw: Optional[str], message: str = "Invalid id") -> int:
    """Identifiers must be plain positive integers that fit the id column."""
    value = (raw or "").strip()
    if not (value.isascii() and value.isdigit()) or not 0 < int(value) <= MAX_DATASET_ID:
        raise ValidationError(message)
    return int(value)


def to_http_error(err: SheetDeskError) -> HTTPException:
    if err.status_code >= 500:
        logger.error("%s: %s", type(err).__name__, err, exc_info=err)
    return HTTPException(status_code=err.status_code, detail=str(err))


# ------------------------------------------------------
# UPLOAD WORKBOOK
# ------------------------------------------------------
@router.post("/upload", response_model=dict)
def upload_dataset(
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        return ingest_upload(db, file, settings.UPLOAD_DIR)
    except SheetDeskError as e:
        raise to_http_error(e)


# ------------------------------------------------------
# LIST DATASETS
# ------------------------------------------------------
@router.get("/datasets", response_model=list)
def get_datasets(db: Session = Depends(get_db)):
    try:
        return list_datasets(db)
    except SheetDeskError as e:
        raise to_http_error(e)


# ------------------------------------------------------
# ROWS OF ONE DATASET
# ------------------------------------------------------
@router.get("/rows", response_model=list)
def get_rows(dataset_id: Optional[str] = None, db: Session = Depends(get_db)):
    try:
        ds_id = parse_dataset_id(dataset_id, "dataset_id is required")
        return get_records(db, ds_id)
    except SheetDeskError as e:
        raise to_http_error(e)


# ------------------------------------------------------
# DELETE DATASET (+ rows + stored file)
# ------------------------------------------------------
@router.delete("/datasets/{dataset_id}", response_model=dict)
def remove_dataset(dataset_id: str, db: Session = Depends(get_db)):
    try:
        ds_id = parse_dataset_id(dataset_id)
        delete_dataset(db, ds_id, settings.UPLOAD_DIR)
    except SheetDeskError as e:
        raise to_http_error(e)

    return {"message": "Deleted dataset and file"}
