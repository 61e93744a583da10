# backend/utils/records.py
from typing import Any, Dict, Iterable, Type

from fastapi import HTTPException
from sqlalchemy.orm import Session


def get_owned(db: Session, model: Type, user_id: int, record_id: int, label: str, lock: bool = False):
    """Fetch one record of `model` belonging to `user_id` or raise 404.

    Records of other owners are reported as missing, never as forbidden.
    """
    query = db.query(model).filter(model.id == record_id, model.user_id == user_id)
    if lock:
        query = query.with_for_update()
    record = query.first()
    if not record:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record


def apply_changes(record: Any, changes: Dict[str, Any], required: Iterable[str] = ()) -> None:
    """Copy a partial-update payload onto `record`.

    Fields listed in `required` may be omitted but not cleared.
    """
    required = set(required)
    for field, value in changes.items():
        if value is None and field in required:
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        setattr(record, field, value)


def search_filter(column, term: str):
    # Case-insensitive substring match
    return column.ilike(f"%{term}%")
