from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class UrlSource(BaseModel):
    # Document ingested from a caller-supplied URL
    type: Literal['url'] = 'url'
    url: str | None = None


class PresetSource(BaseModel):
    # Document ingested from a fixed preset search
    type: Literal['preset'] = 'preset'
    provider: str
    url: str
    preset: str


SummarySource = Annotated[Union[UrlSource, PresetSource], Field(discriminator='type')]

summary_source_adapter = TypeAdapter(SummarySource)


class PresetMeta(BaseModel):
    preset: str
    dateFrom: str
    dateTo: str
    minPages: int
    materiality: str | None = None
    section: str | None = None


class IngestResult(BaseModel):
    # Output of one runner call, consumed once by the request envelope
    normalizedUrl: str | None = None
    sourceUrl: str | None = None
    contentType: str
    text: str
    meta: dict[str, Any] | None = None


class SummaryListItem(BaseModel):
    # Projection of a stored summary document for listings
    id: str
    status: str | None = None
    source: dict[str, Any] | None = None
    contentType: str | None = None
    error: str | None = None
    chars: int = 0
    durationMs: int | None = None
    fetchedAt: str | None = None
