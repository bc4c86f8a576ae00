"""
Period and SubPeriod models.

A Period is a top-level era of Vietnamese history (e.g. the Hồng Bàng
dynasty, the Chinese domination). SubPeriods split a Period into finer
eras and reference their owner by identifier.
"""
from sqlalchemy import Column, Integer, String, Text

from app.models.base import Base, TimestampMixin, new_object_id


class Period(Base, TimestampMixin):
    __tablename__ = "periods"

    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), index=True)  # Selects a color palette
    order = Column("sort_order", Integer, default=0, index=True)
    color = Column(String(30))
    start_year = Column(Integer)  # Negative for BC
    end_year = Column(Integer)
    description = Column(Text)

    def __repr__(self):
        return f"<Period(id={self.id}, name='{self.name}', order={self.order})>"


class SubPeriod(Base, TimestampMixin):
    __tablename__ = "sub_periods"

    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String(200), nullable=False)
    order = Column("sort_order", Integer, default=0, index=True)
    color = Column(String(30))  # Falls back to the parent period color
    period_id = Column(String(24), index=True)
    start_year = Column(Integer)
    end_year = Column(Integer)
    description = Column(Text)

    def __repr__(self):
        return f"<SubPeriod(id={self.id}, name='{self.name}', period_id={self.period_id})>"
