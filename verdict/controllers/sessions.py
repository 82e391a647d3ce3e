"""Session submission and retrieval endpoints.

For a stage-by-stage map see
`verdict.pipelines.analysis.flow.SessionAnalysisPipeline`. The POST
`/api/sessions` pipeline performs:

1. Subscription gate (bypassed in development mode).
2. Validation of names and of the audio the chosen input style needs.
3. Transcription, concurrently for both partners unless it is a live argument.
4. Session creation with the transcripts attached.
5. Streamed analysis whose completion callback stores the verdict envelope.
"""

import logging

from fastapi import APIRouter

from verdict.controllers.dependencies import (
    AnalysisServiceDep,
    SessionStoreDep,
    SettingsDep,
    SubscriptionServiceDep,
    TranscribeServiceDep,
)
from verdict.errors import InputValidationError, NotFoundError
from verdict.pipelines.analysis import (
    AnalysisRequest,
    SessionAnalysisPipeline,
    transcribe_partners,
)
from verdict.services import NewSession
from verdict.views import SessionCreateRequest, SessionCreateResponse, SessionResponse

router = APIRouter(prefix="/sessions", tags=["sessions"])

logger = logging.getLogger(__name__)

PIPELINE_STAGES = tuple(SessionAnalysisPipeline.describe())
"""Ordered pipeline metadata used for quick reference and debugging."""


def _validate_submission(payload: SessionCreateRequest) -> None:
    """Reject submissions missing names or the audio their input style needs."""

    missing_names = [
        field
        for field, value in (
            ("partner1Name", payload.partner1Name),
            ("partner2Name", payload.partner2Name),
        )
        if not value.strip()
    ]
    if len(missing_names) == 2:
        raise InputValidationError("Partner names are required")
    if missing_names:
        raise InputValidationError(f"{missing_names[0]} is required")

    if not payload.partner1Audio:
        raise InputValidationError("partner1Audio is required")

    # A live argument is one shared recording; separate statements need both.
    if not payload.isLiveArgument and not payload.partner2Audio:
        raise InputValidationError("partner2Audio is required unless isLiveArgument is set")


@router.post("", response_model=SessionCreateResponse)
async def create_session(
    payload: SessionCreateRequest,
    app_settings: SettingsDep,
    store: SessionStoreDep,
    transcriber: TranscribeServiceDep,
    analysis: AnalysisServiceDep,
    subscriptions: SubscriptionServiceDep,
) -> SessionCreateResponse:
    """Transcribe the partners' audio, store the session, and return the verdict."""

    if not app_settings.subscription_bypass:
        await subscriptions.require_subscription(payload.email)

    _validate_submission(payload)

    transcripts = await transcribe_partners(
        transcriber,
        partner1_audio=payload.partner1Audio,
        partner2_audio=payload.partner2Audio,
        is_live_argument=payload.isLiveArgument,
    )

    session = await store.create(
        NewSession(
            partner1_name=payload.partner1Name,
            partner2_name=payload.partner2Name,
            partner1_audio=payload.partner1Audio,
            partner2_audio=payload.partner2Audio or "",
            mode=payload.mode.value,
            is_live_argument=payload.isLiveArgument,
            transcription_data=transcripts.as_data(),
        )
    )
    logger.info("Created session=%s mode=%s live=%s", session.id, session.mode, session.is_live_argument)

    async def store_verdict(serialized: str) -> None:
        await store.update_response(session.id, serialized)

    outcome = await analysis.create_analysis_stream(
        AnalysisRequest(
            mode=payload.mode,
            partner1_name=payload.partner1Name,
            partner2_name=payload.partner2Name,
            partner1_text=transcripts.partner1.text,
            partner2_text=transcripts.partner2.text if transcripts.partner2 else None,
            is_live_argument=payload.isLiveArgument,
            session_id=session.id,
        ),
        on_complete=store_verdict,
    )

    return SessionCreateResponse(aiResponse=outcome.ai_response, sessionId=session.id)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: int, store: SessionStoreDep) -> SessionResponse:
    """Return a stored session, including its verdict once analysis finished."""

    session = await store.get(session_id)
    if session is None:
        raise NotFoundError()
    return SessionResponse.model_validate(session)
