from sqlalchemy.orm import Session
from typing import Generic, List, Optional, Type, TypeVar

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Shared CRUD operations. Nothing here commits; see RepositoryAccessors.save_changes."""

    model: Type[T]

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id: str) -> Optional[T]:
        return self.db.get(self.model, entity_id)

    def add(self, entity: T) -> T:
        self.db.add(entity)
        return entity

    def add_range(self, entities: List[T]) -> None:
        self.db.add_all(entities)

    def update(self, entities: List[T]) -> None:
        # Attached instances are tracked already; merge covers detached ones
        for entity in entities:
            self.db.merge(entity)
