# apps/api/insights/routes/voice_stability.py

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request

from insights.schemas.voice import VoiceStabilityChart, VoiceStabilityRequest
from insights.services.voice_stability_service import build_voice_stability

router = APIRouter(prefix="/v1", tags=["voice"])

logger = logging.getLogger(__name__)


@router.post("/voice/stability", response_model=VoiceStabilityChart)
def voice_stability_route(request: Request, body: VoiceStabilityRequest):
    """
    Jitter/shimmer chart series for the requested period, with derived
    thresholds and y axis. Nothing is stored; the body carries the samples.
    """
    try:
        config = request.app.state.analytics_config
        now = body.now or datetime.now(timezone.utc)

        # Privacy: log sizes only, never sample values.
        logger.info(
            "voice stability: period=%s samples=%d",
            body.period.value,
            len(body.samples),
        )
        return build_voice_stability(body.samples, body.period, now, config)

    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("voice stability failed")
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")
