# postgen/features/generate/router.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from postgen.errors import ErrorKind, ProviderError, user_message
from postgen.lib.imaging import decode_image_b64
from postgen.logger import get_logger
from postgen.orchestrator import GenerationOrchestrator, OrchestratorBusy
from postgen.schemas import GenerationRequest, ProgressState
from .schemas import ErrorDetail, GeneratePostRequest, GeneratePostResponse

log = get_logger(__name__)
router = APIRouter(prefix="/api/v1", tags=["generate"])

_STATUS_BY_KIND = {
    ErrorKind.AUTH_MISSING: 401,
    ErrorKind.AUTH_INVALID: 401,
    ErrorKind.QUOTA_EXCEEDED: 429,
}

_orchestrator: Optional[GenerationOrchestrator] = None


def get_orchestrator() -> GenerationOrchestrator:
    """One orchestrator per process: it owns the single in-flight request."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = GenerationOrchestrator()
    return _orchestrator


def shutdown_orchestrator() -> None:
    if _orchestrator is not None:
        _orchestrator.close()


def _to_generation_request(req: GeneratePostRequest) -> GenerationRequest:
    reference = None
    if req.cover_mode == "reference" and req.reference_image_base64:
        try:
            reference = decode_image_b64(req.reference_image_base64)
        except ValueError as e:
            raise HTTPException(400, f"Invalid reference_image_base64: {e}")
    try:
        return GenerationRequest(
            topic=req.topic,
            style=req.style,
            length=req.length,
            cover_mode=req.cover_mode,
            reference_image=reference,
        )
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))


def _provider_http_error(err: ProviderError) -> HTTPException:
    detail = ErrorDetail(kind=err.kind.value, message=user_message(err), actionable=err.actionable)
    return HTTPException(_STATUS_BY_KIND.get(err.kind, 502), detail.model_dump())


@router.post("/generate/post", response_model=GeneratePostResponse)
async def generate_post_endpoint(
    req: GeneratePostRequest,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> GeneratePostResponse:
    gen_req = _to_generation_request(req)
    try:
        result = await orchestrator.generate(gen_req)
    except OrchestratorBusy as e:
        raise HTTPException(409, str(e))
    except ProviderError as e:
        raise _provider_http_error(e)

    cover = result.cover
    cover_src = None
    if cover is not None:
        cover_src = cover.data_url if cover.kind == "inline" else cover.url
    return GeneratePostResponse(
        post=result.post,
        cover=cover,
        cover_src=cover_src,
        progress=orchestrator.progress_state,
    )


@router.get("/generate/progress", response_model=ProgressState)
async def progress_endpoint(
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> ProgressState:
    return orchestrator.progress_state
