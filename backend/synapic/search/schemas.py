from enum import Enum
from typing import Annotated, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchType(str, Enum):
    WEB = "web"
    IMAGE = "image"
    VIDEO = "video"
    NEWS = "news"
    WIKI = "wiki"


def _require_http_url(value: str) -> str:
    parsed = urlparse(value or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"not an absolute http(s) URL: {value!r}")
    return value


class NormalizedResult(BaseModel):
    """A web or news hit after redirect unwrapping; link is always absolute."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    link: str
    snippet: str = ""
    display_url: str = Field(default="", alias="displayUrl")
    source: str

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title is required")
        return v

    @field_validator("link")
    @classmethod
    def _link_absolute(cls, v: str) -> str:
        return _require_http_url(v)


class NewsResult(NormalizedResult):
    image: Optional[str] = None
    date: Optional[str] = None


class ImageResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    image: str
    thumbnail: Optional[str] = None
    link: str

    @field_validator("image")
    @classmethod
    def _image_absolute(cls, v: str) -> str:
        return _require_http_url(v)


class VideoResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    thumbnail: str = ""
    source: str

    @field_validator("url")
    @classmethod
    def _url_absolute(cls, v: str) -> str:
        return _require_http_url(v)


class EncyclopediaSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    summary: str
    image: Optional[str] = None
    url: str


# ----- Responses: one variant per search type -----


class _ResponseBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    start: int = 0
    locale: str
    search_source: str = Field(alias="searchSource")
    elapsed_time: float = Field(default=0.0, alias="elapsedTime")
    country_code: Optional[str] = Field(default=None, alias="countryCode")


class WebResponse(_ResponseBase):
    type: Literal["web"] = "web"
    results: list[NormalizedResult] = Field(default_factory=list)


class ImageResponse(_ResponseBase):
    type: Literal["image"] = "image"
    images: list[ImageResult] = Field(default_factory=list)


class VideoResponse(_ResponseBase):
    type: Literal["video"] = "video"
    videos: list[VideoResult] = Field(default_factory=list)


class NewsResponse(_ResponseBase):
    type: Literal["news"] = "news"
    news_results: list[NewsResult] = Field(default_factory=list, alias="newsResults")


class WikiResponse(_ResponseBase):
    type: Literal["wiki"] = "wiki"
    wiki: Optional[EncyclopediaSummary] = None


SearchResponse = Annotated[
    Union[WebResponse, ImageResponse, VideoResponse, NewsResponse, WikiResponse],
    Field(discriminator="type"),
]
