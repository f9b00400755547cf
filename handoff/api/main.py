from __future__ import annotations

"""
HTTP surface for the handoff parsing core.

Design intent:
- Keep API orchestration thin and typed; domain logic stays in document/extract/patient/note.
- Own the request-layer parse cache and the caller-side timeout on background parsing.
"""

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from handoff.document.emr import clean_text_for_emr
from handoff.document.sections import Section
from handoff.extract.problems import extract_plans
from handoff.extract.signals import extract_clinical_keywords
from handoff.internal_core.config import HandoffConfig, load_config
from handoff.internal_core.contracts import SectionPayload
from handoff.internal_core.dispatcher import ParseDispatchError, ParseDispatcher
from handoff.internal_core.parse_cache import ParseResultCache
from handoff.note.template import (
    TemplateNotFoundError,
    get_template,
    list_templates,
    process_template,
)
from handoff.patient.dashboard import (
    extract_critical_patients,
    extract_labs,
    extract_meds,
    parse_for_dashboard,
)
from handoff.patient.record import build_patient_records_from_sections, resolve_header

MAX_DOCUMENT_CHARS = 2_000_000


class DocumentRequest(BaseModel):
    content: str = Field(default="", max_length=MAX_DOCUMENT_CHARS)


class SectionsResponse(BaseModel):
    sections: list[SectionPayload] = Field(default_factory=list)
    debug: dict[str, Any] = Field(default_factory=dict)


class VitalSignsItem(BaseModel):
    text: str
    bp: str = ""
    hr: str = ""
    temp: str = ""
    o2: str = ""


class TaskProgressItem(BaseModel):
    total: int = 0
    completed: int = 0
    progress: float = 0.0


class PatientRecordItem(BaseModel):
    index: int | None = None
    header: str
    name: str
    room: str = ""
    age: str = ""
    gender: str = ""
    admit_reason: str = ""
    vitals: VitalSignsItem | None = None
    problems: list[str] = Field(default_factory=list)
    status_badges: list[str] = Field(default_factory=list)
    clinical_keywords: list[str] = Field(default_factory=list)
    critical_labs: list[str] = Field(default_factory=list)
    tasks: TaskProgressItem = Field(default_factory=TaskProgressItem)
    summary_snippet: str = ""
    dispo: str = ""
    resident: str = ""
    student: str = ""
    risk_scores: list[str] = Field(default_factory=list)
    admitted_at: int = 0


class PatientsResponse(BaseModel):
    patients: list[PatientRecordItem] = Field(default_factory=list)
    debug: dict[str, Any] = Field(default_factory=dict)


class PlanProblemItem(BaseModel):
    title: str
    details: list[str] = Field(default_factory=list)


class ExtractedPlanItem(BaseModel):
    patient_header: str
    patient_index: int
    problems: list[PlanProblemItem] = Field(default_factory=list)


class PlansResponse(BaseModel):
    plans: list[ExtractedPlanItem] = Field(default_factory=list)


class DashboardPatientItem(BaseModel):
    id: int
    name: str
    room: str = ""
    vitals: str = ""
    critical_labs: list[str] = Field(default_factory=list)
    active_problems: list[str] = Field(default_factory=list)
    acuity: Literal["Low", "Medium", "High"]


class DashboardResponse(BaseModel):
    patients: list[DashboardPatientItem] = Field(default_factory=list)


class SectionLinesItem(BaseModel):
    patient_header: str
    lines: list[str] = Field(default_factory=list)


class SectionLinesResponse(BaseModel):
    items: list[SectionLinesItem] = Field(default_factory=list)


class KeywordsResponse(BaseModel):
    keywords: list[str] = Field(default_factory=list)
    clinical_keywords: list[str] = Field(default_factory=list)


class EmrCleanResponse(BaseModel):
    text: str


class TemplateRenderRequest(BaseModel):
    content: str = Field(default="", max_length=MAX_DOCUMENT_CHARS)
    patient_index: int = Field(default=0, ge=0)
    template: str | None = None
    template_id: str | None = Field(default=None, max_length=128)


class TemplateRenderResponse(BaseModel):
    template_id: str = ""
    patient_header: str
    text: str


class TemplateSummaryItem(BaseModel):
    template_id: str
    template_name: str


class TemplatesResponse(BaseModel):
    templates: list[TemplateSummaryItem] = Field(default_factory=list)


class TemplateDetailResponse(BaseModel):
    template_id: str
    template_name: str
    template_text: str


app = FastAPI(title="handoff parser service")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_config() -> HandoffConfig:
    existing = getattr(app.state, "handoff_config", None)
    if isinstance(existing, HandoffConfig):
        return existing
    created = load_config()
    setattr(app.state, "handoff_config", created)
    _configure_logging(created)
    return created


def _configure_logging(config: HandoffConfig) -> None:
    level = logging.getLevelName(str(config.HANDOFF_LOG_LEVEL or "").strip().upper())
    if isinstance(level, int):
        logging.getLogger("handoff").setLevel(level)
    else:
        logger.warning("unknown_log_level value=%s", config.HANDOFF_LOG_LEVEL)


def _get_dispatcher() -> ParseDispatcher:
    existing = getattr(app.state, "parse_dispatcher", None)
    if isinstance(existing, ParseDispatcher):
        return existing
    created = ParseDispatcher.from_config(_get_config())
    setattr(app.state, "parse_dispatcher", created)
    return created


def _get_parse_cache() -> ParseResultCache:
    existing = getattr(app.state, "parse_cache", None)
    if isinstance(existing, ParseResultCache):
        return existing
    config = _get_config()
    created = ParseResultCache(
        max_size=config.HANDOFF_PARSE_CACHE_SIZE,
        ttl_seconds=config.HANDOFF_PARSE_CACHE_TTL_SECONDS,
    )
    setattr(app.state, "parse_cache", created)
    return created


async def _await_background(future: Any, *, what: str) -> Any:
    timeout = _get_config().HANDOFF_PARSE_TIMEOUT_SECONDS
    try:
        # shield: a timed-out caller must not cancel a future other callers share.
        return await asyncio.wait_for(asyncio.shield(asyncio.wrap_future(future)), timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("background_timeout what=%s timeout_sec=%s", what, timeout)
        raise HTTPException(status_code=504, detail=f"Background {what} timed out.") from exc
    except ParseDispatchError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


async def _parse_sections(content: str) -> tuple[list[Section], dict[str, Any]]:
    cache = _get_parse_cache()
    dispatcher = _get_dispatcher()
    key = cache.key_for(content)
    cache_hit = cache.get(key) is not None
    future = cache.get_or_submit(key, lambda: dispatcher.parse_async(content))
    sections = await _await_background(future, what="parse")
    debug = {
        "cache_hit": cache_hit,
        "worker_ready": dispatcher.is_worker_ready,
        "section_count": len(sections),
    }
    return list(sections), debug


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/document/sections", response_model=SectionsResponse)
async def document_sections(payload: DocumentRequest) -> SectionsResponse:
    sections, debug = await _parse_sections(payload.content)
    return SectionsResponse(
        sections=[SectionPayload(header=item.header, lines=list(item.lines)) for item in sections],
        debug=debug,
    )


@app.post("/document/patients", response_model=PatientsResponse)
async def document_patients(payload: DocumentRequest) -> PatientsResponse:
    sections, debug = await _parse_sections(payload.content)
    records = build_patient_records_from_sections(sections)
    return PatientsResponse(
        patients=[PatientRecordItem.model_validate(asdict(record)) for record in records],
        debug=debug,
    )


@app.post("/document/plans", response_model=PlansResponse)
async def document_plans(payload: DocumentRequest) -> PlansResponse:
    plans = extract_plans(payload.content)
    return PlansResponse(plans=[ExtractedPlanItem.model_validate(asdict(item)) for item in plans])


@app.post("/document/dashboard", response_model=DashboardResponse)
async def document_dashboard(payload: DocumentRequest) -> DashboardResponse:
    patients = parse_for_dashboard(payload.content)
    return DashboardResponse(
        patients=[DashboardPatientItem.model_validate(asdict(item)) for item in patients]
    )


@app.post("/document/critical", response_model=SectionLinesResponse)
async def document_critical(payload: DocumentRequest) -> SectionLinesResponse:
    items = extract_critical_patients(payload.content)
    return SectionLinesResponse(items=[SectionLinesItem.model_validate(asdict(item)) for item in items])


@app.post("/document/labs", response_model=SectionLinesResponse)
async def document_labs(payload: DocumentRequest) -> SectionLinesResponse:
    items = extract_labs(payload.content)
    return SectionLinesResponse(items=[SectionLinesItem.model_validate(asdict(item)) for item in items])


@app.post("/document/meds", response_model=SectionLinesResponse)
async def document_meds(payload: DocumentRequest) -> SectionLinesResponse:
    items = extract_meds(payload.content)
    return SectionLinesResponse(items=[SectionLinesItem.model_validate(asdict(item)) for item in items])


@app.post("/document/keywords", response_model=KeywordsResponse)
async def document_keywords(payload: DocumentRequest) -> KeywordsResponse:
    future = _get_dispatcher().extract_keywords_async(payload.content)
    keywords = await _await_background(future, what="keyword scan")
    return KeywordsResponse(
        keywords=list(keywords),
        clinical_keywords=extract_clinical_keywords(payload.content),
    )


@app.post("/document/emr-clean", response_model=EmrCleanResponse)
async def document_emr_clean(payload: DocumentRequest) -> EmrCleanResponse:
    return EmrCleanResponse(text=clean_text_for_emr(payload.content))


@app.get("/templates", response_model=TemplatesResponse)
async def templates_list() -> TemplatesResponse:
    try:
        specs = list_templates(_get_config().template_dir_path())
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return TemplatesResponse(
        templates=[
            TemplateSummaryItem(template_id=spec.template_id, template_name=spec.template_name)
            for spec in specs
        ]
    )


@app.get("/templates/{template_id}", response_model=TemplateDetailResponse)
async def templates_detail(template_id: str) -> TemplateDetailResponse:
    try:
        spec = get_template(template_id, _get_config().template_dir_path())
    except TemplateNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return TemplateDetailResponse(
        template_id=spec.template_id,
        template_name=spec.template_name,
        template_text=spec.template_text,
    )


@app.post("/template/render", response_model=TemplateRenderResponse)
async def template_render(payload: TemplateRenderRequest) -> TemplateRenderResponse:
    config = _get_config()
    template_id = str(payload.template_id or "").strip()
    template_text = payload.template or ""
    if template_id and not template_text:
        try:
            template_text = get_template(template_id, config.template_dir_path()).template_text
        except TemplateNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
    if not template_text.strip():
        raise HTTPException(status_code=400, detail="Provide one of: template, template_id.")

    sections, _ = await _parse_sections(payload.content)
    patients = [item for item in sections if not item.is_preamble]
    if payload.patient_index >= len(patients):
        raise HTTPException(
            status_code=404,
            detail=f"Patient index out of range: {payload.patient_index} (patients={len(patients)})",
        )
    section = patients[payload.patient_index]
    header = resolve_header(section, payload.patient_index)
    text = process_template(
        template_text,
        header,
        section.lines,
        date_format=config.HANDOFF_DATE_FORMAT,
        time_format=config.HANDOFF_TIME_FORMAT,
    )
    return TemplateRenderResponse(template_id=template_id, patient_header=header, text=text)
