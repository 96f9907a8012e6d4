from typing import Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db import Base, TimestampMixin


class Mall(TimestampMixin, Base):
    __tablename__ = "mall"
    __table_args__ = (
        Index("idx_mall_code", "code", unique=True),
        Index("idx_mall_province", "province_id"),
        Index("idx_mall_city", "city_id"),
        Index("idx_mall_district", "district_id"),
    )

    name: Mapped[str] = mapped_column(String)
    code: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    logo: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    province_id: Mapped[int] = mapped_column(ForeignKey("province.id"))
    city_id: Mapped[int] = mapped_column(ForeignKey("city.id"))
    district_id: Mapped[Optional[int]] = mapped_column(ForeignKey("district.id"), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    floor_count: Mapped[int] = mapped_column(Integer, default=1)
    total_area: Mapped[float] = mapped_column(Float, default=0)
    parking_spaces: Mapped[int] = mapped_column(Integer, default=0)
    opening_hours: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    province = relationship("Province")
    city = relationship("City")
    district = relationship("District")
    stores = relationship("BrandStore", back_populates="mall")
