"""HTTP routes for the AI features and resume downloads.

Every AI route charges the caller's quota first, then validates the body,
then runs the model call under the feature's deadline. Errors are raised as
GuardError subclasses and rendered by the handler in api.app.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from portfolio_ai.export.geometry import PageGeometry
from portfolio_ai.export.pdf_writer import render_resume_pdf
from portfolio_ai.models.optimizer import OptimizedResume
from portfolio_ai.profile.builder import apply_optimization, build_resume_document, resume_filename
from portfolio_ai.profile.models import CandidateSnapshot
from portfolio_ai.safety.errors import InvalidPayload, MissingField
from portfolio_ai.safety.guard import QuotaDecision
from portfolio_ai.safety.policies import RateLimitPolicy
from portfolio_ai.safety.validation import require_payload
from portfolio_ai.services.chat_assistant import DISCLAIMER, ChatAssistant
from portfolio_ai.services.resume_optimizer import ResumeOptimizer
from portfolio_ai.services.translator import SOURCE_LANGUAGE, TARGET_LANGUAGE, Translator

logger = logging.getLogger(__name__)

router = APIRouter()

TRACKS = ("it", "translation", "both")


def _services(request: Request):
    return request.app.state.services


def _admit(request: Request, policy_name: str) -> tuple[RateLimitPolicy, QuotaDecision]:
    services = _services(request)
    policy = services.config.policy(policy_name)
    peer = request.client.host if request.client else None
    decision = services.guard.admit(request.headers, policy, peer=peer)
    request.state.quota = decision
    return policy, decision


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidPayload("body", "Invalid JSON body") from None
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidPayload("body", "Invalid JSON body")
    return body


def _track(value: Any) -> str:
    track = value or "both"
    if track not in TRACKS:
        raise InvalidPayload("track", f"track must be one of {', '.join(TRACKS)}")
    return track


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.post("/api/ai/chat")
async def chat(request: Request) -> JSONResponse:
    policy, decision = _admit(request, "chat")
    body = await _json_body(request)
    message = require_payload(body.get("message"), policy.max_payload_chars, "message")

    services = _services(request)
    assistant = ChatAssistant(
        services.llm,
        services.profile,
        model=services.config.llm.model,
        max_response_chars=services.config.server.chat_max_response_chars,
    )
    reply = await services.guard.call(
        assistant.reply(message),
        policy,
        timeout_message="Request took too long. Please try a simpler question.",
        failure_message="Failed to process request. Please try again later.",
    )
    return JSONResponse(
        {"success": True, "response": reply, "disclaimer": DISCLAIMER},
        headers=decision.headers(),
    )


@router.post("/api/ai/translate")
async def translate(request: Request) -> JSONResponse:
    policy, decision = _admit(request, "translate")
    body = await _json_body(request)
    text = require_payload(body.get("text"), policy.max_payload_chars, "text")

    services = _services(request)
    translator_name = (
        f"{services.profile.full_name} (Professional Translator)" if services.has_profile else ""
    )
    translator = Translator(services.llm, model=services.config.llm.model, translator_name=translator_name)
    translated = await services.guard.call(
        translator.translate(text),
        policy,
        timeout_message="Translation took too long. Please try with shorter text.",
        failure_message="Failed to process translation. Please try again later.",
    )
    return JSONResponse(
        {
            "success": True,
            "originalText": text,
            "translatedText": translated,
            "sourceLanguage": SOURCE_LANGUAGE,
            "targetLanguage": TARGET_LANGUAGE,
            "translator": translator.translator_name,
        },
        headers=decision.headers(),
    )


@router.post("/api/resume/optimize")
async def optimize_resume(request: Request) -> JSONResponse:
    policy, decision = _admit(request, "optimizer")
    body = await _json_body(request)
    job_description = require_payload(
        body.get("jobDescription"), policy.max_payload_chars, "jobDescription"
    )

    services = _services(request)
    raw_candidate = body.get("candidateData")
    if raw_candidate is not None:
        try:
            candidate = CandidateSnapshot.model_validate(raw_candidate)
        except ValidationError:
            raise InvalidPayload("candidateData", "Invalid candidateData structure") from None
    elif services.has_profile:
        candidate = CandidateSnapshot.from_profile(services.profile)
    else:
        raise MissingField("candidateData")

    optimizer = ResumeOptimizer(services.llm, model=services.config.llm.optimizer_model)
    result = await services.guard.call(
        optimizer.optimize(job_description, candidate),
        policy,
        timeout_message=(
            "Request took too long. Job descriptions may be too long or system is busy. "
            "Please try again."
        ),
        failure_message="Failed to optimize resume. Please try again later.",
    )
    return JSONResponse({"success": True, **result.to_response()}, headers=decision.headers())


async def _pdf_response(
    request: Request,
    track: str,
    optimized: OptimizedResume | None,
    job_title: str | None,
) -> Response:
    services = _services(request)
    profile = services.profile
    document = build_resume_document(profile, track)
    if optimized is not None:
        document = apply_optimization(document, optimized)
    geometry = PageGeometry.from_config(services.config.layout)
    pdf_bytes, pages = await asyncio.to_thread(render_resume_pdf, document, geometry)
    filename = resume_filename(profile, track, job_title if optimized is not None else None)
    logger.info("Rendered %s (%d page(s))", filename, len(pages))
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/api/resume/pdf")
async def download_resume(request: Request, track: str = "both") -> Response:
    return await _pdf_response(request, _track(track), None, None)


@router.post("/api/resume/pdf")
async def download_optimized_resume(request: Request) -> Response:
    body = await _json_body(request)
    track = _track(body.get("track"))
    optimized = None
    if body.get("optimized") is not None:
        try:
            optimized = OptimizedResume.model_validate(body["optimized"])
        except ValidationError:
            raise InvalidPayload("optimized", "Invalid optimized resume data") from None
    job_title = body.get("jobTitle")
    if job_title is not None and not isinstance(job_title, str):
        raise InvalidPayload("jobTitle", "jobTitle must be a string")
    return await _pdf_response(request, track, optimized, job_title or "position")
