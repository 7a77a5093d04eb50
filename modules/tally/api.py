from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from . import get_service
from .models import AllocationField
from .models.schemas import (
    AllocationUpdate,
    ExportResult,
    FinalFlagIn,
    MetadataUpdate,
    MethaneUpdate,
    NoticeRead,
    PatientEventIn,
    ReclassifyIn,
    ReportDocumentRead,
    ResourceAdjustIn,
    ShareLinks,
    TallyResponse,
    TallyStateRead,
    UnknownAdjustIn,
)
from .services import ActionResult, TallyService

router = APIRouter(prefix="/api/tally", tags=["tally"])


def _response(service: TallyService, result: ActionResult | None = None) -> TallyResponse:
    notice = None
    if result is not None and result.notice is not None:
        notice = NoticeRead.model_validate(result.notice)
    return TallyResponse(
        state=TallyStateRead.model_validate(service.state.to_dict()),
        notice=notice,
        highlight_unknown=service.highlight_unknown,
    )


def _allocation_call(func, *args) -> ActionResult:
    try:
        return func(*args)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0]) if exc.args else "Not found") from exc


@router.get("/state", response_model=TallyResponse)
def read_state(service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service)


@router.get("/catalog", response_model=list[str])
def read_catalog(service: TallyService = Depends(get_service)) -> list[str]:
    return list(service.catalog.options())


@router.post("/patients", response_model=TallyResponse)
def record_patient(payload: PatientEventIn, service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, service.record_patient_event(payload.channel, payload.delta))


@router.post("/reclassify", response_model=TallyResponse)
def reclassify(payload: ReclassifyIn, service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, service.reclassify(payload.category, payload.direction))


@router.post("/unknown", response_model=TallyResponse)
def adjust_unknown(payload: UnknownAdjustIn, service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, service.adjust_unknown_direct(payload.axis, payload.direction))


@router.post("/resources", response_model=TallyResponse)
def adjust_resource(payload: ResourceAdjustIn, service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, service.adjust_resource(payload.counter, payload.delta))


@router.patch("/metadata", response_model=TallyResponse)
def update_metadata(payload: MetadataUpdate, service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, service.update_metadata(**payload.model_dump(exclude_none=True)))


@router.patch("/methane", response_model=TallyResponse)
def update_methane(payload: MethaneUpdate, service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, service.update_methane(**payload.model_dump(exclude_none=True)))


@router.post("/final", response_model=TallyResponse)
def set_final(payload: FinalFlagIn, service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, service.set_final(payload.is_final))


@router.post("/allocations", response_model=TallyResponse)
def add_allocation(service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, service.add_allocation())


@router.patch("/allocations/{record_id}", response_model=TallyResponse)
def update_allocation(
    record_id: str, payload: AllocationUpdate, service: TallyService = Depends(get_service)
) -> TallyResponse:
    if payload.field is AllocationField.COUNT:
        try:
            int(payload.value)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail="count must be an integer") from exc
    result = _allocation_call(service.set_allocation, record_id, payload.field, payload.value)
    return _response(service, result)


@router.post("/allocations/{record_id}/revert", response_model=TallyResponse)
def revert_allocation(record_id: str, service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, _allocation_call(service.revert_allocation_to_catalog, record_id))


@router.delete("/allocations/{record_id}", response_model=TallyResponse)
def remove_allocation(record_id: str, service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, _allocation_call(service.remove_allocation, record_id))


@router.post("/reset", response_model=TallyResponse)
def reset_session(service: TallyService = Depends(get_service)) -> TallyResponse:
    return _response(service, service.reset_session())


@router.get("/summary", response_class=PlainTextResponse)
def read_summary(service: TallyService = Depends(get_service)) -> str:
    return service.summary_text()


@router.get("/share", response_model=ShareLinks)
def read_share_links(service: TallyService = Depends(get_service)) -> ShareLinks:
    return ShareLinks(text=service.summary_text(), whatsapp_url=service.share_url())


@router.get("/report", response_model=ReportDocumentRead)
def read_report(service: TallyService = Depends(get_service)) -> ReportDocumentRead:
    document = service.build_report()
    return ReportDocumentRead(filename=service.report_filename(), **document.to_dict())


@router.post("/export/pdf", response_model=ExportResult)
def export_pdf(service: TallyService = Depends(get_service)) -> ExportResult:
    return ExportResult(file_path=str(service.export_to_pdf()))


__all__ = ["router"]
