from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from .service import HierarchyService
from .store import SqlAlchemyHierarchyStore

def get_hierarchy_service(db: Session = Depends(get_db)) -> HierarchyService:
    return HierarchyService(SqlAlchemyHierarchyStore(db))
