from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class PlatformBalanceResponse(BaseModel):
    user_id: int
    balance: Decimal
    updated_at: Optional[datetime] = None
