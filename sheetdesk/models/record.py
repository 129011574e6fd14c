from sqlalchemy import Column, Integer, ForeignKey, JSON
from sqlalchemy.orm import relationship

from ..core.db import Base


class Record(Base):
    __tablename__ = "rows"

    id = Column(Integer, primary_key=True, index=True)
    dataset_id = Column(
        Integer, ForeignKey("datasets.id", ondelete="CASCADE"), index=True, nullable=False
    )

    # One spreadsheet row: {column header: cell value}, in header order
    data = Column(JSON, nullable=False)

    dataset = relationship("Dataset", back_populates="records")

    def to_dict(self) -> dict:
        return {"id": self.id, **self.data}
