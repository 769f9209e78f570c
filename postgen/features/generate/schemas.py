# postgen/features/generate/schemas.py
from typing import Optional
from pydantic import BaseModel, Field

from postgen.schemas import CoverMode, CoverResult, GeneratedPost, Length, ProgressState, Style

class GeneratePostRequest(BaseModel):
    topic: str = Field(..., min_length=1, description="What the post is about")
    style: Style = "emotional"
    length: Length = "medium"
    cover_mode: CoverMode = "auto"
    # Optional image provided as base64 or data URL (e.g., 'data:image/png;base64,....')
    reference_image_base64: Optional[str] = Field(
        None, description="Optional PNG/JPEG/WEBP base64 (raw or data URL); used only with cover_mode='reference'"
    )

class GeneratePostResponse(BaseModel):
    post: GeneratedPost
    cover: Optional[CoverResult] = None
    cover_src: Optional[str] = Field(None, description="Ready-to-use image src: data URL or fallback URL")
    progress: ProgressState

class ErrorDetail(BaseModel):
    kind: str
    message: str
    actionable: bool
