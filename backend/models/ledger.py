from sqlalchemy import Column, Integer, CheckConstraint

from models import Base

LEDGER_SLOT = 1


class LedgerSequence(Base):
    __tablename__ = "ledger_sequence"
    __table_args__ = (CheckConstraint(f"id = {LEDGER_SLOT}", name="single_ledger"),)

    id = Column(Integer, primary_key=True, autoincrement=False, default=LEDGER_SLOT)
    value = Column(Integer, nullable=False, default=0)
