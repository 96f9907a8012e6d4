from typing import Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db import Base, TimestampMixin


class Brand(TimestampMixin, Base):
    __tablename__ = "brand"
    __table_args__ = (Index("idx_brand_code", "code", unique=True),)

    name: Mapped[str] = mapped_column(String)
    code: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    logo: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # Legacy single-location anchor; multi-location presence lives in BrandStore.
    province_id: Mapped[Optional[int]] = mapped_column(ForeignKey("province.id"), nullable=True)
    city_id: Mapped[Optional[int]] = mapped_column(ForeignKey("city.id"), nullable=True)
    district_id: Mapped[Optional[int]] = mapped_column(ForeignKey("district.id"), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    sort: Mapped[int] = mapped_column(Integer, default=0)
    score: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)

    province = relationship("Province")
    city = relationship("City")
    district = relationship("District")
    stores = relationship("BrandStore", back_populates="brand")
