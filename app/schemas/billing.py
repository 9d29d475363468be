from pydantic import BaseModel
from typing import List

from app.schemas.admin_users import TransactionResponse


class BucketTotalResponse(BaseModel):
    total_cents: int
    count: int


class BillingSummaryResponse(BaseModel):
    today: BucketTotalResponse
    last_7_days: BucketTotalResponse
    last_15_days: BucketTotalResponse
    last_30_days: BucketTotalResponse
    all_time: BucketTotalResponse


class TransactionListResponse(BaseModel):
    items: List[TransactionResponse]
    total: int
