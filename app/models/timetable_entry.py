from sqlalchemy import Column, Integer, String, Index
from app.database import Base


class TimetableEntry(Base):
    __tablename__ = "timetable_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # weak references to the roster, existence is not enforced
    class_id = Column(Integer, nullable=True)
    teacher_id = Column(Integer, nullable=True)

    subject = Column(String(120), nullable=False)
    day_of_week = Column(Integer, nullable=False)   # 1=Mon .. 7=Sun
    start_time = Column(String(5), nullable=False)  # 'HH:MM'
    end_time = Column(String(5), nullable=False)
    room = Column(String(50))

    __table_args__ = (
        Index("ix_timetable_class_day", "class_id", "day_of_week"),
        Index("ix_timetable_teacher_day", "teacher_id", "day_of_week"),
        # never hand out the id of a deleted entry again
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return (
            f"<TimetableEntry id={self.id} day={self.day_of_week} "
            f"{self.start_time}-{self.end_time} subject={self.subject!r}>"
        )
