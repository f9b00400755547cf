from __future__ import annotations

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

WorkerRequestKind = Literal["PARSE_DOCUMENT", "EXTRACT_KEYWORDS"]
WorkerResponseKind = Literal["PARSE_RESULT", "KEYWORDS_RESULT", "ERROR"]


class SectionPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    header: str
    lines: List[str] = Field(default_factory=list)


class ContentPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    content: str = ""


class ParseDocumentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["PARSE_DOCUMENT"] = "PARSE_DOCUMENT"
    id: str
    payload: ContentPayload


class ExtractKeywordsRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["EXTRACT_KEYWORDS"] = "EXTRACT_KEYWORDS"
    id: str
    payload: ContentPayload


class ParseResultMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["PARSE_RESULT"] = "PARSE_RESULT"
    id: str
    result: List[SectionPayload] = Field(default_factory=list)


class KeywordsResultMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["KEYWORDS_RESULT"] = "KEYWORDS_RESULT"
    id: str
    result: List[str] = Field(default_factory=list)


class WorkerErrorMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["ERROR"] = "ERROR"
    id: str
    error: str


WorkerRequest = Annotated[
    Union[ParseDocumentRequest, ExtractKeywordsRequest],
    Field(discriminator="kind"),
]
WorkerResponse = Annotated[
    Union[ParseResultMessage, KeywordsResultMessage, WorkerErrorMessage],
    Field(discriminator="kind"),
]

WORKER_REQUEST_ADAPTER: TypeAdapter[WorkerRequest] = TypeAdapter(WorkerRequest)
WORKER_RESPONSE_ADAPTER: TypeAdapter[WorkerResponse] = TypeAdapter(WorkerResponse)
