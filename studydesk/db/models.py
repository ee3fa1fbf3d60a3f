from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Text

class Base(DeclarativeBase):
    pass

class KeyValue(Base):
    """One durable local value, e.g. the serialized timetable or the provisioned subjects."""
    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False)
