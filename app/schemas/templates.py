from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any, Dict
from datetime import datetime

from app.models.plan import PlanType
from app.schemas.common import PartialUpdate

TEMPLATE_CATEGORIES = {
    "lead_capture": "Captação de Leads",
    "sales": "Vendas",
    "support": "Suporte",
    "onboarding": "Onboarding",
    "reactivation": "Reativação",
    "general": "Geral",
}


def _check_category(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in TEMPLATE_CATEGORIES:
        raise ValueError(f"Unknown category: {value}")
    return value


class FunnelTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: str = Field("general", min_length=1, max_length=50)
    is_free: bool = True
    is_active: bool = True
    min_plan: PlanType = PlanType.FREE
    nodes: List[Dict[str, Any]] = Field(..., min_length=1)
    edges: List[Dict[str, Any]] = []

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return _check_category(v)


class FunnelTemplateUpdate(PartialUpdate):
    not_nullable = ("name", "category", "is_free", "is_active", "min_plan", "nodes", "edges")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    is_free: Optional[bool] = None
    is_active: Optional[bool] = None
    min_plan: Optional[PlanType] = None
    nodes: Optional[List[Dict[str, Any]]] = None
    edges: Optional[List[Dict[str, Any]]] = None

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return _check_category(v)


class FunnelTemplateImport(BaseModel):
    """Exported funnel JSON: nodes and edges, optionally with metadata."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    nodes: List[Dict[str, Any]] = Field(..., min_length=1)
    edges: List[Dict[str, Any]] = []

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return _check_category(v)


class FunnelTemplateResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: str
    is_free: bool
    is_active: bool
    min_plan: PlanType
    nodes: List[Dict[str, Any]] = []
    edges: List[Dict[str, Any]] = []
    schema_version: int
    template_version: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FunnelTemplateSummary(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: str
    is_free: bool
    min_plan: PlanType
    node_count: int
    template_version: int
