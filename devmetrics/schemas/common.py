
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class DateRange(BaseModel):
    """Inclusive [start, end] window on calendar days; either side may be open."""
    start: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    end: Optional[str] = Field(default=None, description="YYYY-MM-DD")

    def contains(self, when: Union[str, date, datetime, None]) -> bool:
        if when is None:
            return False
        day = when if isinstance(when, str) else when.isoformat()
        day = day[:10]
        if self.start and day < self.start:
            return False
        if self.end and day > self.end:
            return False
        return True


class CacheStats(BaseModel):
    size: int
    keys: List[str]


class CacheCleared(BaseModel):
    cleared: int
    size: int


class Health(BaseModel):
    status: str = "ok"


EnvStatus = Dict[str, str]
