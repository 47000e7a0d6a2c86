# service/api/ats.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from typing import Any, Dict, Optional
from functools import lru_cache
import json
import logging

from resume.errors import AnalysisError, ImprovementNotFoundError
from resume.models import ResumeSnapshot
from resume.ats.models import ATSResult
from resume.ats.analyzer import ATSAnalyzer
from service.config import settings

router = APIRouter()
logger = logging.getLogger(__name__)

ANALYSIS_FAILED = "Failed to analyze resume"


class AnalyzeRequest(BaseModel):
    resume: Dict[str, Any]
    job_description: str = ""
    mode: Optional[str] = None


class ApplyRequest(BaseModel):
    resume: Dict[str, Any]
    result: Dict[str, Any]
    improvement_id: str


class ApplyAllRequest(BaseModel):
    resume: Dict[str, Any]
    result: Dict[str, Any]


class RecomputeRequest(BaseModel):
    resume: Dict[str, Any]
    result: Dict[str, Any]
    job_description: str = ""
    mode: Optional[str] = None


@lru_cache()
def get_analyzer() -> ATSAnalyzer:
    """Shared analyzer built from the service settings"""
    return ATSAnalyzer(settings.engine_config())


def _parse(resume: Dict[str, Any], result: Dict[str, Any]):
    try:
        return ResumeSnapshot.from_dict(resume), ATSResult.from_dict(result)
    except AnalysisError as e:
        logger.warning(f"Rejected request: {e}")
        raise HTTPException(status_code=400, detail=ANALYSIS_FAILED)


@router.post("/analyze")
async def analyze(request: AnalyzeRequest, analyzer: ATSAnalyzer = Depends(get_analyzer)) -> Dict:
    """Score a resume and list improvements"""
    try:
        result = analyzer.analyze_payload(request.model_dump())
    except AnalysisError as e:
        logger.warning(f"Analysis failed: {e}")
        raise HTTPException(status_code=400, detail=ANALYSIS_FAILED)

    return result.to_dict()


@router.post("/apply")
async def apply_improvement(request: ApplyRequest, analyzer: ATSAnalyzer = Depends(get_analyzer)) -> Dict:
    """Apply one improvement by id"""
    resume, result = _parse(request.resume, request.result)

    try:
        outcome = analyzer.apply_improvement(result, request.improvement_id, resume)
    except ImprovementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return outcome.to_dict()


@router.post("/apply-all")
async def apply_all(request: ApplyAllRequest, analyzer: ATSAnalyzer = Depends(get_analyzer)) -> Dict:
    """Apply every pending improvement"""
    resume, result = _parse(request.resume, request.result)
    return analyzer.apply_all(result, resume).to_dict()


@router.post("/apply-all/stream")
async def stream_apply_all(request: ApplyAllRequest, analyzer: ATSAnalyzer = Depends(get_analyzer)):
    """Apply every pending improvement, streaming each step (SSE)"""
    resume, result = _parse(request.resume, request.result)

    async def event_generator():
        async for outcome in analyzer.apply_all_async(result, resume):
            yield f"data: {json.dumps(outcome.to_dict())}\n\n"

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream"
    )


@router.post("/recompute")
async def recompute(request: RecomputeRequest, analyzer: ATSAnalyzer = Depends(get_analyzer)) -> Dict:
    """Rescore the resume after edits, keeping the improvement list"""
    resume, result = _parse(request.resume, request.result)

    try:
        fresh = analyzer.recompute(result, resume, request.job_description, request.mode)
    except AnalysisError as e:
        logger.warning(f"Recompute failed: {e}")
        raise HTTPException(status_code=400, detail=ANALYSIS_FAILED)

    return fresh.to_dict()
