from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db import Base, TimestampMixin


class BrandStore(TimestampMixin, Base):
    """A placement: the fact that a brand occupies a mall.

    province/city/district are copied from the mall when the row is created and
    are not re-synced if the mall later moves.
    """

    __tablename__ = "brand_store"
    __table_args__ = (
        UniqueConstraint("brand_id", "mall_id", name="uq_brand_store_brand_mall"),
        Index("idx_brand_store_brand", "brand_id"),
        Index("idx_brand_store_mall", "mall_id"),
        Index("idx_brand_store_province", "province_id"),
        Index("idx_brand_store_city", "city_id"),
        Index("idx_brand_store_district", "district_id"),
    )

    brand_id: Mapped[int] = mapped_column(ForeignKey("brand.id"))
    mall_id: Mapped[int] = mapped_column(ForeignKey("mall.id"))
    province_id: Mapped[Optional[int]] = mapped_column(ForeignKey("province.id"), nullable=True)
    city_id: Mapped[Optional[int]] = mapped_column(ForeignKey("city.id"), nullable=True)
    district_id: Mapped[Optional[int]] = mapped_column(ForeignKey("district.id"), nullable=True)
    store_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    store_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    floor: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    unit_number: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    opening_hours: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    score: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_ola: Mapped[bool] = mapped_column(Boolean, default=False)

    brand = relationship("Brand", back_populates="stores")
    mall = relationship("Mall", back_populates="stores")
    province = relationship("Province")
    city = relationship("City")
    district = relationship("District")
