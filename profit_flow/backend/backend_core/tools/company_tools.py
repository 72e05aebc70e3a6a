"""
Company information tool.
"""

from typing import Any, Dict, Literal
import logging

from pydantic import BaseModel, field_validator

from profit_flow.backend.backend_core.company import CompanyKnowledgeBase
from profit_flow.backend.backend_core.tools.registry import Tool

logger = logging.getLogger(__name__)

CATEGORIES = ["all", "features", "pricing", "benefits", "support", "faq", "subscription"]


class CompanyInfoArgs(BaseModel):
    category: Literal["all", "features", "pricing", "benefits", "support", "faq", "subscription"] = "all"

    @field_validator("category", mode="before")
    @classmethod
    def _lower(cls, v):
        if v is None:
            return "all"
        return v.lower() if isinstance(v, str) else v


class GetCompanyInfoTool(Tool):
    args_model = CompanyInfoArgs

    def __init__(self, knowledge_base: CompanyKnowledgeBase):
        self.knowledge_base = knowledge_base

    @property
    def name(self) -> str:
        return "get_company_info"

    @property
    def description(self) -> str:
        return f"Get information about {self.knowledge_base.organization} company and services"

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "enum": CATEGORIES,
                    "description": "Category of information requested",
                },
            },
        }

    async def execute(self, category: str = "all") -> Dict[str, Any]:
        # NotConfigured propagates: a missing document fails the turn
        return self.knowledge_base.lookup(category)


def register_company_tools(registry, knowledge_base: CompanyKnowledgeBase):
    """Register company information tools."""
    registry.register(GetCompanyInfoTool(knowledge_base))
