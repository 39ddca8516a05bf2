# apps/api/insights/routes/checkins.py

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request

from insights.schemas.checkins import (
    CheckInSummary,
    CheckInSummaryRequest,
    StreakRequest,
    StreakResponse,
)
from insights.services.checkin_summary_service import summarize_checkins
from insights.services.streak_service import current_streak, is_milestone

router = APIRouter(prefix="/v1", tags=["checkins"])

logger = logging.getLogger(__name__)


@router.post("/checkins/streak", response_model=StreakResponse)
def checkin_streak_route(request: Request, body: StreakRequest):
    try:
        config = request.app.state.analytics_config
        today = body.today or datetime.now(timezone.utc)

        logger.info("checkin streak: events=%d", len(body.events))
        streak = current_streak(body.events, today, config)
        return {
            "streak": streak,
            "milestone": is_milestone(streak),
            "requires_today": config.streak_requires_today,
        }

    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("checkin streak failed")
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")


@router.post("/checkins/summary", response_model=CheckInSummary)
def checkin_summary_route(request: Request, body: CheckInSummaryRequest):
    """
    Check-in totals, dominant emotion, distribution, weekday pattern and
    current streak over the trailing window for `period`.
    """
    try:
        config = request.app.state.analytics_config
        now = body.now or datetime.now(timezone.utc)

        logger.info(
            "checkin summary: period=%s events=%d",
            body.period.value,
            len(body.events),
        )
        return summarize_checkins(body.events, body.period, now, config)

    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("checkin summary failed")
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")
