from typing import Optional

from sqlalchemy import Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base, TimestampMixin


class Dictionary(TimestampMixin, Base):
    """Type-tagged label/value pairs used to decode coded fields such as brand category."""

    __tablename__ = "dictionary"
    __table_args__ = (
        UniqueConstraint("type", "value", name="uq_dictionary_type_value"),
        Index("idx_dictionary_type", "type"),
    )

    type: Mapped[str] = mapped_column(String)
    label: Mapped[str] = mapped_column(String)
    value: Mapped[str] = mapped_column(String)
    sort: Mapped[int] = mapped_column(Integer, default=0)
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
