from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, NamedTuple, Optional

from pydantic import BaseModel, Field


class RollupTuple(NamedTuple):
    key: str
    label: str
    count: int


class DerivedDocument(BaseModel):
    id: str
    key: str
    marker: str
    count: int
    bucket: str
    doc_type: str
    created: datetime

    def to_source(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"id"})


class WriteReceipt(BaseModel):
    id: str
    index: str
    type_label: str
    created_at: datetime


class PingInfo(BaseModel):
    version: str
    status_code: int


class ProvisionResult(BaseModel):
    created: bool
    acknowledged: bool = True


class GetReceipt(BaseModel):
    found: bool
    id: str
    index: str
    type_label: Optional[str] = None
    version: Optional[int] = None
    source: Dict[str, Any] = Field(default_factory=dict)


class UpdateReceipt(BaseModel):
    id: str
    index: str
    new_version: int
    result: str
