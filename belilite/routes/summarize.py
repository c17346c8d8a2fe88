"""
BeliLite Backend — Summarize Route Handler
============================================

What:  POST /api/summarize — relays text to the configured LLM provider.
Who:   Called by the Summarize button of the browser client.

Error responses (handled by global exception handlers):
    HTTP 400: text missing or whitespace-only (ValidationError)
    HTTP 401: provider rejected the API key (UpstreamAuthError)
    HTTP 429: provider rate limit (UpstreamRateLimitError)
    HTTP 500: key not configured, or any other provider failure
"""

import logging

from fastapi import APIRouter, Depends, Request

from belilite.schemas.note import ErrorResponse, SummarizeRequest, SummarizeResponse
from belilite.services.llm_base import LLMService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Summarize"])


def get_summarizer(request: Request) -> LLMService:
    """Dependency returning the process-wide summarization service."""
    return request.app.state.summarizer


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses={
        400: {"description": "Text is required", "model": ErrorResponse},
        401: {"description": "Invalid upstream API key", "model": ErrorResponse},
        429: {"description": "Upstream rate limit exceeded", "model": ErrorResponse},
        500: {"description": "Not configured or upstream failure", "model": ErrorResponse},
    },
    summary="Summarize text in 2-3 sentences",
)
async def summarize(
    payload: SummarizeRequest,
    summarizer: LLMService = Depends(get_summarizer),
) -> SummarizeResponse:
    summary = await summarizer.summarize(payload.text)
    logger.info("Summarized %d chars into %d chars", len(payload.text or ""), len(summary))
    return SummarizeResponse(summary=summary)
