from sqlalchemy.orm import Session


class BaseRepository:
    """Repositories never commit; the UnitOfWork owning ``db`` does."""

    def __init__(self, db: Session):
        self.db = db
