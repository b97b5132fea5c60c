from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_TERM = "popular"


class AssetKind(str, Enum):
    ICON = "icon"
    THREE_D = "3d"
    ILLUSTRATION = "illustration"
    ANIMATION = "animation"
    PHOTO = "photo"
    VECTOR = "vector"


class SearchQuery(BaseModel):
    term: str = DEFAULT_TERM
    page: int = 1
    page_size: int = 20
    kind: AssetKind = AssetKind.ICON

    @field_validator("term", mode="before")
    @classmethod
    def _default_blank_term(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_TERM
        return value

    @field_validator("page", "page_size")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        return max(value, 1)


class ThumbnailUrls(BaseModel):
    small: Optional[str] = None
    medium: Optional[str] = None
    original: Optional[str] = None


class NormalizedAsset(BaseModel):
    id: str
    display_name: str = Field(..., min_length=1)
    thumbnail_urls: ThumbnailUrls = Field(default_factory=ThumbnailUrls)
    preview_url: Optional[str] = None


class SearchResult(BaseModel):
    success: bool
    data: List[NormalizedAsset] = Field(default_factory=list)
    pagination: Dict[str, Any] = Field(default_factory=dict)
    note: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None
    status_code: int = Field(default=200, exclude=True)

    def to_response_body(self) -> Dict[str, Any]:
        # NormalizedAsset keeps its None thumbnail sizes; only envelope extras are dropped
        body = self.model_dump()
        for key in ("note", "error", "message"):
            if body[key] is None:
                del body[key]
        return body
