from sqlalchemy import Column, Integer, CheckConstraint

from models import Base

# The table only ever holds this one row
ACTIVE_GRANT_SLOT = 1


class ActiveGrant(Base):
    __tablename__ = "active_grant"
    __table_args__ = (CheckConstraint(f"id = {ACTIVE_GRANT_SLOT}", name="single_slot"),)

    id = Column(Integer, primary_key=True, autoincrement=False, default=ACTIVE_GRANT_SLOT)
    patient_id = Column(Integer, nullable=False, default=0)
    provider_id = Column(Integer, nullable=False, default=0)
    record_id = Column(Integer, nullable=False, default=0)
    permissions = Column(Integer, nullable=False, default=0)
