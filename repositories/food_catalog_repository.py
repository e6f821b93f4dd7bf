"""
Food Catalog Repository - read-only lookup over the food_database table
"""

from typing import Dict, Iterable, List, Optional, Protocol
from sqlalchemy.orm import Session

from domain.models.food import FoodCatalogEntry
from repositories.base import BaseRepository


class FoodCatalog(Protocol):
    """Lookup contract the engines depend on. Implementations return active entries only."""

    def find_by_names(self, names: Iterable[str]) -> Dict[str, FoodCatalogEntry]:
        ...

    def find_similar(self, excluding: str) -> List[FoodCatalogEntry]:
        ...

    def get_by_name(self, name: str) -> Optional[FoodCatalogEntry]:
        ...

    def list_active(self) -> List[FoodCatalogEntry]:
        ...


class FoodCatalogRepository(BaseRepository[FoodCatalogEntry]):
    """Repository for catalog data in the relational store"""

    def __init__(self, db: Session):
        super().__init__(db, FoodCatalogEntry)

    def _active(self):
        return self.db.query(FoodCatalogEntry).filter(
            FoodCatalogEntry.is_active.is_(True)
        )

    def get_by_name(self, name: str) -> Optional[FoodCatalogEntry]:
        """Exact-name lookup"""
        return self._active().filter(FoodCatalogEntry.name == name).first()

    def find_by_names(self, names: Iterable[str]) -> Dict[str, FoodCatalogEntry]:
        """Resolve a batch of names in one query; missing names are simply absent"""
        wanted = {n for n in names if n}
        if not wanted:
            return {}
        rows = self._active().filter(FoodCatalogEntry.name.in_(wanted)).all()
        return {row.name: row for row in rows}

    def find_similar(self, excluding: str) -> List[FoodCatalogEntry]:
        """All active entries except the one named `excluding`, ordered by name"""
        return (
            self._active()
            .filter(FoodCatalogEntry.name != excluding)
            .order_by(FoodCatalogEntry.name)
            .all()
        )

    def list_active(self) -> List[FoodCatalogEntry]:
        """Every active entry, ordered by name"""
        return self._active().order_by(FoodCatalogEntry.name).all()

    def search_by_name(self, query: str, limit: int = 20) -> List[FoodCatalogEntry]:
        """Case-insensitive partial match, used by the food picker"""
        pattern = f"%{query.lower().strip()}%"
        return (
            self._active()
            .filter(FoodCatalogEntry.name.ilike(pattern))
            .order_by(FoodCatalogEntry.name)
            .limit(limit)
            .all()
        )
