from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional

from sqlmodel import Session, select

# Domain & Infra Imports
from ..infrastructure.database.tables import KeyValueDBModel
from ..infrastructure.database.connection import engine as default_engine, init_db


class KeyValueStore(ABC):
    """
    Durable, scoped key-value storage for small local state (authoring
    drafts, the saved admin key).
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str):
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Returns True if the key existed."""
        pass


class InMemoryKeyValueStore(KeyValueStore):
    """
    Uses an in-memory dictionary for testing/dev purposes.
    """

    def __init__(self):
        self._store: Dict[str, str] = {}
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set(self, key: str, value: str):
        self._store[key] = value
        self.write_count += 1

    def delete(self, key: str) -> bool:
        if key in self._store:
            del self._store[key]
            return True
        return False


class SqlKeyValueStore(KeyValueStore):
    """
    SQL-backed storage. Entries of different scopes never collide, so several
    authoring contexts can share one database.
    """

    def __init__(self, scope: str = "default", engine=None):
        self.scope = scope
        self.engine = engine or default_engine
        init_db(self.engine)

    def _find(self, db: Session, key: str) -> Optional[KeyValueDBModel]:
        statement = select(KeyValueDBModel).where(
            KeyValueDBModel.scope == self.scope, KeyValueDBModel.key == key
        )
        return db.exec(statement).first()

    def get(self, key: str) -> Optional[str]:
        with Session(self.engine) as db:
            result = self._find(db, key)
            return result.value if result else None

    def set(self, key: str, value: str):
        with Session(self.engine) as db:
            result = self._find(db, key)
            if result:
                result.value = value
                result.updated_at = datetime.utcnow()
            else:
                result = KeyValueDBModel(scope=self.scope, key=key, value=value)
            db.add(result)
            db.commit()

    def delete(self, key: str) -> bool:
        with Session(self.engine) as db:
            result = self._find(db, key)
            if result:
                db.delete(result)
                db.commit()
                return True
            return False
