# postgen/features/topics/schemas.py
from typing import List
from pydantic import BaseModel, Field

class RelatedTopicsRequest(BaseModel):
    topic: str = Field("", description="Seed topic; blank returns no suggestions")

class RelatedTopicsResponse(BaseModel):
    topics: List[str]
