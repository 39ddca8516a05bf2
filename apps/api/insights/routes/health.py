from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])

@router.get("/health")
def health():
    return {"ok": True, "project": "insights"}

@router.get("/health/config")
def health_config(request: Request):
    config = request.app.state.analytics_config
    return {
        "config": "ok",
        "expressive_floor": config.expressive_floor,
        "streak_requires_today": config.streak_requires_today,
        "windows": {p.value: f"{u.value}:{n}" for p, (u, n) in config.windows.items()},
    }
