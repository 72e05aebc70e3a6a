"""
Company knowledge base.

A single static document per organization, stored as JSON and looked up by
section. "subscription" is an alias for "pricing".
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

import yaml

from profit_flow.backend.backend_core.database import Database
from profit_flow.backend.backend_core.errors import NotConfigured
from profit_flow.backend.backend_core.models import CompanyInfo

logger = logging.getLogger(__name__)

COMPANY_SECTIONS = ("features", "pricing", "benefits", "support", "faq")
CATEGORY_ALIASES = {"subscription": "pricing"}


def resolve_category(category: Optional[str]) -> str:
    category = (category or "all").lower()
    return CATEGORY_ALIASES.get(category, category)


class CompanyKnowledgeBase:
    def __init__(self, database: Database, organization: str = "Profit Flow"):
        self._database = database
        self.organization = organization

    def _document(self) -> Dict[str, Any]:
        with self._database.session() as db:
            row = db.query(CompanyInfo).filter(CompanyInfo.name == self.organization).first()
            if row is None:
                raise NotConfigured(self.organization)
            return dict(row.document or {})

    def lookup(self, category: Optional[str] = "all") -> Dict[str, Any]:
        """
        Return the full document for "all", otherwise ``{category: section}``.

        The section value is None when the document has no such section.

        Raises:
            NotConfigured: no document stored for this organization
        """
        document = self._document()
        category = resolve_category(category)
        if category == "all":
            return {"name": self.organization, **document}
        return {category: document.get(category)}

    def exists(self) -> bool:
        with self._database.session() as db:
            return db.query(CompanyInfo).filter(CompanyInfo.name == self.organization).first() is not None

    def upsert(self, document: Dict[str, Any]) -> None:
        document = {k: v for k, v in document.items() if k != "name"}
        with self._database.session() as db:
            row = db.query(CompanyInfo).filter(CompanyInfo.name == self.organization).first()
            if row is None:
                db.add(CompanyInfo(name=self.organization, document=document))
            else:
                row.document = document
            db.commit()
        logger.info(f"Company info stored for '{self.organization}' ({', '.join(sorted(document))})")

    def seed_from_yaml(self, path: Union[str, Path], overwrite: bool = False) -> bool:
        """
        Load the document from a YAML file.

        The file may hold the document directly or keyed by organization name.
        Returns False (without writing) when a document exists and overwrite is off.
        """
        if not overwrite and self.exists():
            logger.info(f"Company info for '{self.organization}' already present; skipping seed")
            return False

        raw = Path(path).read_text(encoding="utf-8")
        data = yaml.safe_load(raw) if raw.strip() else None
        if not isinstance(data, dict):
            raise ValueError(f"Company info file {path} does not contain a mapping")
        if isinstance(data.get(self.organization), dict):
            data = data[self.organization]

        self.upsert(data)
        return True
