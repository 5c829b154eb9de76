"""Buyer and company model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String

from booking.database import Base

class Company(Base):
    """Organisation a buyer books on behalf of."""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)


class Buyer(Base):
    """The requesting side of an appointment."""
    __tablename__ = "buyers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True)
