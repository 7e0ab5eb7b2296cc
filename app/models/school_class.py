from sqlalchemy import Column, Integer, String, Text
from app.database import Base

class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True)
    name = Column(String(100))
    description = Column(Text)
