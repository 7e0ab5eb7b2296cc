class TimetableError(Exception):
    """Base for every rejected timetable operation."""


class ValidationError(TimetableError, ValueError):
    pass


class NotFoundError(TimetableError, LookupError):
    def __init__(self, entry_id):
        self.entry_id = entry_id
        super().__init__(f"Timetable entry {entry_id} not found")


class ConflictError(TimetableError):
    """An overlap with an already scheduled entry."""

    def __init__(self, scope: str, entry):
        self.scope = scope
        self.entry_id = entry.id
        self.subject = entry.subject
        self.start_time = entry.start_time
        self.end_time = entry.end_time
        subject = f"'{entry.subject}' " if entry.subject else ""
        super().__init__(
            f"Overlaps with entry {subject}from {entry.start_time} to {entry.end_time}"
        )

    def to_detail(self) -> dict:
        return {
            "message": str(self),
            "scope": self.scope,
            "conflict_entry_id": self.entry_id,
            "subject": self.subject,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }
