from typing import List
from io import BytesIO

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.timetable_store import TimetableStore
from app.schemas.timetable import (
    TimetableEntryIn, TimetableEntryOut,
    CopyDayIn, CopyWeekIn, CopyResultOut, DeleteResultOut,
)
from app.utils.errors import ValidationError, ConflictError, NotFoundError
from app.utils.excel_export import entry_rows, timetable_to_xlsx_bytes, make_filename

import logging
logger = logging.getLogger("app.timetable")


router = APIRouter(prefix="/api/timetable", tags=["Timetable"])


def get_store(db: Session = Depends(get_db)) -> TimetableStore:
    return TimetableStore(db)


def _xlsx_response(entries, prefix: str, sheet_name: str):
    data = timetable_to_xlsx_bytes(entry_rows(entries), sheet_name=sheet_name)
    filename = make_filename(prefix)
    return StreamingResponse(
        BytesIO(data),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# create, or update when id is given
@router.post("", response_model=TimetableEntryOut)
def create_or_update_entry(body: TimetableEntryIn, store: TimetableStore = Depends(get_store)):
    try:
        return store.upsert(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        logger.info("Rejected timetable write: %s", e)
        raise HTTPException(status_code=409, detail=e.to_detail())


@router.delete("/{entry_id}", response_model=DeleteResultOut)
def delete_entry(entry_id: int, store: TimetableStore = Depends(get_store)):
    try:
        store.delete(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return DeleteResultOut(success=True)


@router.get("/class/{class_id}", response_model=List[TimetableEntryOut])
def list_for_class(class_id: int, store: TimetableStore = Depends(get_store)):
    return store.list_by_class(class_id)


@router.get("/teacher/{teacher_id}", response_model=List[TimetableEntryOut])
def list_for_teacher(teacher_id: int, store: TimetableStore = Depends(get_store)):
    return store.list_by_teacher(teacher_id)


@router.post("/copy-day", response_model=CopyResultOut)
def copy_day(body: CopyDayIn, store: TimetableStore = Depends(get_store)):
    try:
        return store.copy_day(body.from_day, body.to_day, body.scope, body.scope_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/copy-week", response_model=CopyResultOut)
def copy_week_to_class(body: CopyWeekIn, store: TimetableStore = Depends(get_store)):
    try:
        return store.copy_week_to_class(body.from_class_id, body.to_class_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


# Excel export
@router.get("/class/{class_id}/export")
def export_class_timetable(class_id: int, store: TimetableStore = Depends(get_store)):
    entries = store.list_by_class(class_id)
    return _xlsx_response(entries, f"timetable_class_{class_id}", f"Class {class_id}")


@router.get("/teacher/{teacher_id}/export")
def export_teacher_timetable(teacher_id: int, store: TimetableStore = Depends(get_store)):
    entries = store.list_by_teacher(teacher_id)
    return _xlsx_response(entries, f"timetable_teacher_{teacher_id}", f"Teacher {teacher_id}")
