from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from storefront.models.store_setting import StoreSetting


class SettingsRepository:
    def __init__(self, session: Session):
        self.session = session

    def _row(self, key: str) -> Optional[StoreSetting]:
        return self.session.exec(
            select(StoreSetting).where(StoreSetting.key == key)
        ).first()

    def get_value(self, key: str) -> Optional[dict]:
        row = self._row(key)
        return row.value if row else None

    def upsert(self, key: str, value: dict) -> StoreSetting:
        row = self._row(key)
        if not row:
            row = StoreSetting(key=key)
        row.value = value
        row.updated_at = datetime.utcnow()
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def delete(self, key: str):
        row = self._row(key)
        if row:
            self.session.delete(row)
            self.session.commit()
