# postgen/schemas.py
from enum import Enum
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Style = Literal["emotional", "educational", "promotion", "rant"]
Length = Literal["short", "medium", "long"]
CoverMode = Literal["auto", "reference", "template"]


class Phase(str, Enum):
    IDLE = "idle"
    GENERATING_TEXT = "generatingText"
    GENERATING_COVER = "generatingCover"
    DONE = "done"
    FAILED = "failed"

    @property
    def active(self) -> bool:
        return self in (Phase.GENERATING_TEXT, Phase.GENERATING_COVER)


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str = Field(..., min_length=1, description="What the post is about")
    style: Style = "emotional"
    length: Length = "medium"
    cover_mode: CoverMode = "auto"
    # Raw PNG/JPEG bytes; only used for cover_mode="reference"
    reference_image: Optional[bytes] = Field(None, repr=False)

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("topic must not be blank")
        return v

    @model_validator(mode="before")
    @classmethod
    def _drop_unused_reference(cls, data):
        if isinstance(data, dict) and data.get("cover_mode", "auto") != "reference":
            data = {k: v for k, v in data.items() if k != "reference_image"}
        return data


class CoverSummary(BaseModel):
    main_title: str = ""
    highlight_text: str = ""
    body_preview: str = ""

    @field_validator("main_title", "highlight_text", "body_preview", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return "" if v is None else v


class GeneratedPost(BaseModel):
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    cover_summary: Optional[CoverSummary] = None
    image_prompt: Optional[str] = Field(None, description="English background-image description")


class CoverResult(BaseModel):
    kind: Literal["inline", "fallback_url", "template"]
    image_base64: Optional[str] = Field(None, repr=False)
    mime_type: Optional[str] = None
    url: Optional[str] = None
    template: Optional[CoverSummary] = None

    @model_validator(mode="after")
    def _one_payload(self):
        if self.kind == "inline":
            if not self.image_base64 or self.url or self.template:
                raise ValueError("inline cover needs image_base64 and nothing else")
            if not self.mime_type:
                self.mime_type = "image/png"
        elif self.kind == "fallback_url":
            if not self.url or self.image_base64 or self.template:
                raise ValueError("fallback cover needs url and nothing else")
        else:
            if self.template is None or self.image_base64 or self.url:
                raise ValueError("template cover needs template fields and nothing else")
        return self

    @property
    def data_url(self) -> Optional[str]:
        if self.kind != "inline":
            return None
        return f"data:{self.mime_type};base64,{self.image_base64}"


class ProgressState(BaseModel):
    percent: int = Field(0, ge=0, le=100)
    phase: Phase = Phase.IDLE


class GenerationResult(BaseModel):
    post: GeneratedPost
    cover: Optional[CoverResult] = None
