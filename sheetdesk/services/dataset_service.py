from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, StoreError
from ..core.logger import get_logger
from ..models.dataset import Dataset
from ..models.record import Record

logger = get_logger(__name__)


def create_dataset(
    db: Session,
    stored_name: str,
    original_name: str,
    uploaded_at: Optional[datetime] = None,
) -> Dataset:
    """
    Add a Dataset row and flush so it gets its id.
    Does not commit; the caller owns the transaction.
    """
    ds = Dataset(
        filename=stored_name,
        originalname=original_name,
        uploaded_at=uploaded_at or datetime.now(timezone.utc),
    )
    try:
        db.add(ds)
        db.flush()
    except SQLAlchemyError as e:
        raise StoreError("Failed to save dataset") from e
    return ds


def insert_records(db: Session, dataset_id: int, records: Iterable[Dict[str, Any]]) -> int:
    """
    Add one Record per mapping under dataset_id and flush.
    Any failed row fails the whole batch. Returns the number of rows added.
    """
    rows = [Record(dataset_id=dataset_id, data=dict(r)) for r in records]
    try:
        db.add_all(rows)
        db.flush()
    except (SQLAlchemyError, TypeError, ValueError) as e:
        raise StoreError("Failed to save rows") from e
    return len(rows)


def save_dataset(
    db: Session,
    stored_name: str,
    original_name: str,
    records: List[Dict[str, Any]],
) -> Tuple[Dataset, int]:
    """
    Create the dataset and all of its records in one transaction.
    On any failure nothing is committed.
    """
    try:
        ds = create_dataset(db, stored_name, original_name)
        saved = insert_records(db, ds.id, records)
        db.commit()
    except StoreError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to save dataset") from e

    db.refresh(ds)
    return ds, saved


def list_datasets(db: Session) -> List[Dict[str, Any]]:
    """All datasets, newest first."""
    try:
        datasets = db.query(Dataset).order_by(Dataset.id.desc()).all()
    except SQLAlchemyError as e:
        raise StoreError("Failed to fetch datasets") from e

    return [
        {"id": ds.id, "originalname": ds.originalname, "uploaded_at": ds.uploaded_at}
        for ds in datasets
    ]


def get_dataset(db: Session, dataset_id: int) -> Dataset:
    ds = db.query(Dataset).filter(Dataset.id == dataset_id).first()
    if ds is None:
        raise NotFoundError("Dataset not found")
    return ds


def get_records(db: Session, dataset_id: int) -> List[Dict[str, Any]]:
    """
    Records of a dataset in insertion order, each as {"id": ..., **data}.
    An unknown dataset simply has no records.
    """
    try:
        records = (
            db.query(Record)
            .filter(Record.dataset_id == dataset_id)
            .order_by(Record.id)
            .all()
        )
    except SQLAlchemyError as e:
        raise StoreError("Failed to fetch rows") from e

    return [r.to_dict() for r in records]


def delete_dataset(db: Session, dataset_id: int, upload_dir: Path) -> None:
    """
    Delete a dataset, its records (cascade) and then its stored file.
    The file is only touched once the row deletion is committed.
    """
    try:
        ds = get_dataset(db, dataset_id)
        stored_path = Path(upload_dir) / ds.filename
        db.delete(ds)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to delete dataset") from e

    logger.info("Deleted dataset %s (%s)", dataset_id, stored_path.name)

    try:
        stored_path.unlink(missing_ok=True)
    except OSError:
        logger.warning("Dataset %s deleted but file %s could not be removed", dataset_id, stored_path)
