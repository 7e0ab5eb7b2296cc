from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.timetable_entry import TimetableEntry
from app.models.school_class import SchoolClass
from app.models.teacher import Teacher
from app.schemas.timetable import TimetableEntryIn, TimetableEntryOut, CopyResultOut
from app.utils.conflict import find_conflict
from app.utils.errors import TimetableError, ValidationError, ConflictError, NotFoundError

logger = logging.getLogger("app.timetable")

# Serialises overlap-check + write across request threads.
_write_lock = threading.RLock()


@dataclass(frozen=True)
class CopyOutcome:
    source_id: int
    created: bool
    reason: Optional[str] = None


def tally(outcomes: List[CopyOutcome]) -> CopyResultOut:
    created = sum(1 for o in outcomes if o.created)
    return CopyResultOut(created=created, skipped=len(outcomes) - created)


def _full_name(first_name, last_name) -> Optional[str]:
    name = " ".join(p for p in (first_name, last_name) if p)
    return name or None


class TimetableStore:
    """
    Owns the timetable_entries table.

    Every accepted write keeps, per day, the [start_time, end_time) intervals of
    one class (and of one teacher) free of overlaps. Class and teacher scopes are
    checked independently; rooms are not checked.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- queries ----------

    @staticmethod
    def _ordered(q):
        return q.order_by(
            TimetableEntry.day_of_week.asc(),
            TimetableEntry.start_time.asc(),
            TimetableEntry.id.asc(),
        )

    @staticmethod
    def _out(entry: TimetableEntry, **names) -> TimetableEntryOut:
        out = TimetableEntryOut.model_validate(entry)
        return out.model_copy(update=names) if names else out

    def list_by_class(self, class_id: int) -> List[TimetableEntryOut]:
        rows = self._ordered(
            self.db.query(TimetableEntry, Teacher.first_name, Teacher.last_name)
            .outerjoin(Teacher, Teacher.id == TimetableEntry.teacher_id)
            .filter(TimetableEntry.class_id == class_id)
        ).all()
        return [self._out(e, teacher_name=_full_name(fn, ln)) for e, fn, ln in rows]

    def list_by_teacher(self, teacher_id: int) -> List[TimetableEntryOut]:
        rows = self._ordered(
            self.db.query(TimetableEntry, SchoolClass.name)
            .outerjoin(SchoolClass, SchoolClass.id == TimetableEntry.class_id)
            .filter(TimetableEntry.teacher_id == teacher_id)
        ).all()
        return [self._out(e, class_name=class_name) for e, class_name in rows]

    def list_by_scope(self, scope: str, scope_id: int) -> List[TimetableEntryOut]:
        if scope == "class":
            return self.list_by_class(scope_id)
        if scope == "teacher":
            return self.list_by_teacher(scope_id)
        raise ValidationError(f"unknown scope '{scope}'")

    # ---------- writes ----------

    @staticmethod
    def _validate(body: TimetableEntryIn):
        if body.class_id is None and body.teacher_id is None:
            raise ValidationError("class or teacher required")
        if not body.subject or body.day_of_week is None or not body.start_time or not body.end_time:
            raise ValidationError("missing required field")
        if body.start_time >= body.end_time:
            raise ValidationError("start must precede end")

    def _check_overlap(self, scope: str, column, ref_id, body: TimetableEntryIn):
        if ref_id is None:
            return
        q = self.db.query(TimetableEntry).filter(
            TimetableEntry.day_of_week == body.day_of_week,
            column == ref_id,
        )
        if body.id is not None:
            q = q.filter(TimetableEntry.id != body.id)
        existing = q.order_by(TimetableEntry.start_time.asc(), TimetableEntry.id.asc()).all()

        hit = find_conflict(existing, body.start_time, body.end_time)
        if hit is not None:
            raise ConflictError(scope, hit)

    def upsert(self, body: TimetableEntryIn) -> TimetableEntryOut:
        try:
            self._validate(body)
        except ValidationError as e:
            logger.info("Rejected timetable write (id=%s): %s", body.id, e)
            raise

        with _write_lock:
            try:
                entry = None
                if body.id is not None:
                    entry = self.db.get(TimetableEntry, body.id)
                    if entry is None:
                        raise NotFoundError(body.id)

                self._check_overlap("class", TimetableEntry.class_id, body.class_id, body)
                self._check_overlap("teacher", TimetableEntry.teacher_id, body.teacher_id, body)

                if entry is None:
                    entry = TimetableEntry()
                    self.db.add(entry)

                entry.class_id = body.class_id
                entry.teacher_id = body.teacher_id
                entry.subject = body.subject
                entry.day_of_week = body.day_of_week
                entry.start_time = body.start_time
                entry.end_time = body.end_time
                entry.room = body.room

                self.db.commit()
                self.db.refresh(entry)
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Timetable write failed (id=%s)", body.id)
                raise
            except TimetableError:
                self.db.rollback()
                raise

        logger.info(
            "%s timetable entry %s: class=%s teacher=%s day=%s %s-%s",
            "Updated" if body.id is not None else "Created",
            entry.id, entry.class_id, entry.teacher_id,
            entry.day_of_week, entry.start_time, entry.end_time,
        )
        return self._out(entry)

    def delete(self, entry_id: int) -> None:
        with _write_lock:
            entry = self.db.get(TimetableEntry, entry_id)
            if entry is None:
                raise NotFoundError(entry_id)
            try:
                self.db.delete(entry)
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Timetable delete failed (id=%s)", entry_id)
                raise
        logger.info("Deleted timetable entry %s", entry_id)

    # ---------- best-effort batch copies ----------

    def _copy_one(self, source: TimetableEntryOut, candidate: TimetableEntryIn) -> CopyOutcome:
        try:
            self.upsert(candidate)
        except (TimetableError, SQLAlchemyError) as e:
            logger.info("Copy of entry %s skipped: %s", source.id, e)
            return CopyOutcome(source_id=source.id, created=False, reason=str(e))
        return CopyOutcome(source_id=source.id, created=True)

    def copy_day(self, from_day: int, to_day: int, scope: str, scope_id: int) -> CopyResultOut:
        """
        Copy the entries of `from_day` for one class or teacher onto `to_day`.

        Entries are inserted one by one in (start_time) order, so each copy sees the
        ones committed before it. Failed copies are counted, never raised.
        """
        for day in (from_day, to_day):
            if not 1 <= day <= 7:
                raise ValidationError(f"day_of_week must be between 1 and 7, got {day}")
        if from_day == to_day:
            raise ValidationError("source and target day must differ")

        source = [e for e in self.list_by_scope(scope, scope_id) if e.day_of_week == from_day]

        outcomes = []
        for e in source:
            candidate = TimetableEntryIn(
                class_id=scope_id if scope == "class" else e.class_id,
                teacher_id=scope_id if scope == "teacher" else e.teacher_id,
                subject=e.subject,
                day_of_week=to_day,
                start_time=e.start_time,
                end_time=e.end_time,
                room=e.room,
            )
            outcomes.append(self._copy_one(e, candidate))

        result = tally(outcomes)
        logger.info(
            "Copy day %s -> %s (%s %s): created %s, skipped %s",
            from_day, to_day, scope, scope_id, result.created, result.skipped,
        )
        return result

    def copy_week_to_class(self, from_class_id: int, to_class_id: int) -> CopyResultOut:
        """
        Copy every entry of one class onto another, keeping day, times, subject,
        room and teacher. Same best-effort policy as copy_day.
        """
        if from_class_id == to_class_id:
            raise ValidationError("source and target class must differ")

        outcomes = []
        for e in self.list_by_class(from_class_id):
            candidate = TimetableEntryIn(
                class_id=to_class_id,
                teacher_id=e.teacher_id,
                subject=e.subject,
                day_of_week=e.day_of_week,
                start_time=e.start_time,
                end_time=e.end_time,
                room=e.room,
            )
            outcomes.append(self._copy_one(e, candidate))

        result = tally(outcomes)
        logger.info(
            "Copy week class %s -> %s: created %s, skipped %s",
            from_class_id, to_class_id, result.created, result.skipped,
        )
        return result
