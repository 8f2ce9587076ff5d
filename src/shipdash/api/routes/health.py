"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/session", status_code=status.HTTP_200_OK)
def health_session(request: Request) -> dict:
    """Report whether the anonymous session was established and the store subscribed."""
    dashboard = request.app.state.dashboard
    return {
        "established": dashboard.session.established,
        "subscribed": dashboard.ready,
        "error": dashboard.error,
    }


def _get_geocoder_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.geocoding import check_health as geocoder_health_check
    return geocoder_health_check


@router.get("/health/geocoder", status_code=status.HTTP_200_OK)
def health_geocoder() -> dict:
    """Check geocoding service health."""
    try:
        geocoder_health_check = _get_geocoder_health_check()
        return {"service": "geocoder", "healthy": geocoder_health_check()}
    except Exception as e:
        return {"service": "geocoder", "healthy": False, "error": str(e)}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection and shipment table status."""
    from ...config import settings
    from ...db.supabase import get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set SHIPDASH_SUPABASE_URL and SHIPDASH_SUPABASE_KEY environment variables.",
        }

    try:
        response = supabase.table(settings.shipments_table).select("id", count="exact").limit(1).execute()
        return {
            "configured": True,
            "connected": True,
            "shipments_count": response.count,
            "message": f"Database connected. Found {response.count} shipments.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
