from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.db import Base


class Dataset(Base):
    __tablename__ = "datasets"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String, nullable=False)       # stored name under UPLOAD_DIR
    originalname = Column(String, nullable=False)   # name the user uploaded

    uploaded_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    records = relationship(
        "Record",
        back_populates="dataset",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Record.id",
    )
