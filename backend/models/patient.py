from sqlalchemy import Column, Integer, String, Boolean

from models import Base

PUBLIC_KEY_MAX_LENGTH = 66


class PatientProfile(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    public_key = Column(String(PUBLIC_KEY_MAX_LENGTH), nullable=False)
    hashed_password = Column(String(255))
    is_active = Column(Boolean, default=True)
    created_seq = Column(Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            "id": self.id,
            "public_key": self.public_key,
            "is_active": self.is_active,
            "created_seq": self.created_seq,
        }
