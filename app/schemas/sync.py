from pydantic import BaseModel
from typing import Dict


class RevisionsResponse(BaseModel):
    revisions: Dict[str, int]
