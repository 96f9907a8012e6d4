from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db import Base, TimestampMixin


class Province(TimestampMixin, Base):
    __tablename__ = "province"

    name: Mapped[str] = mapped_column(String, unique=True)
    code: Mapped[str] = mapped_column(String, unique=True)
    brand_count: Mapped[int] = mapped_column(Integer, default=0)
    mall_count: Mapped[int] = mapped_column(Integer, default=0)
    district_count: Mapped[int] = mapped_column(Integer, default=0)

    cities = relationship("City", back_populates="province")


class City(TimestampMixin, Base):
    __tablename__ = "city"
    __table_args__ = (
        UniqueConstraint("province_id", "name", name="uq_city_province_name"),
        Index("idx_city_province", "province_id"),
    )

    name: Mapped[str] = mapped_column(String)
    code: Mapped[str] = mapped_column(String)
    province_id: Mapped[int] = mapped_column(ForeignKey("province.id"))
    brand_count: Mapped[int] = mapped_column(Integer, default=0)
    mall_count: Mapped[int] = mapped_column(Integer, default=0)
    district_count: Mapped[int] = mapped_column(Integer, default=0)

    province = relationship("Province", back_populates="cities")
    districts = relationship("District", back_populates="city")


class District(TimestampMixin, Base):
    __tablename__ = "district"
    __table_args__ = (
        UniqueConstraint("city_id", "name", name="uq_district_city_name"),
        Index("idx_district_city", "city_id"),
        Index("idx_district_province", "province_id"),
    )

    name: Mapped[str] = mapped_column(String)
    code: Mapped[str] = mapped_column(String)
    city_id: Mapped[int] = mapped_column(ForeignKey("city.id"))
    province_id: Mapped[int] = mapped_column(ForeignKey("province.id"))
    brand_count: Mapped[int] = mapped_column(Integer, default=0)
    mall_count: Mapped[int] = mapped_column(Integer, default=0)

    city = relationship("City", back_populates="districts")
    province = relationship("Province")
