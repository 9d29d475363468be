from pydantic import BaseModel
from typing import Optional, List


class TableCount(BaseModel):
    table: str
    count: Optional[int] = None
    error: Optional[str] = None


class FunctionCheck(BaseModel):
    name: str
    url: str
    status_code: Optional[int] = None
    reachable: bool
    latency_ms: int
    error: Optional[str] = None


class RouteInfo(BaseModel):
    path: str
    methods: List[str]
    name: str
    requires_auth: bool
