from .db import Base, engine
from ..models import dataset, record  # noqa: F401


def init_db(bind=None):
    # Models are imported above so SQLAlchemy knows both tables
    Base.metadata.create_all(bind=bind or engine)
