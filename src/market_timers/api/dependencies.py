"""
API Dependencies - provider access for FastAPI endpoints

Pattern:
1. main_asyncio.py opens the MarketTimerProvider
2. main_asyncio.py calls set_provider() once it is active
3. Endpoints use get_provider() via Depends()

Example:
    @router.get("/timers")
    async def get_timers(provider: MarketTimerProvider = Depends(get_provider)):
        return provider.values
"""

from typing import Optional

from fastapi import HTTPException, status

from market_timers.services.market_timer_provider import MarketTimerProvider

# Set by main_asyncio.py (or a test) once the provider scope is open
_provider: Optional[MarketTimerProvider] = None


def set_provider(provider: Optional[MarketTimerProvider]) -> None:
    """Store (or clear, with None) the provider served by the API."""
    global _provider
    _provider = provider


async def get_provider() -> MarketTimerProvider:
    """
    FastAPI dependency for the active provider.

    Raises:
        HTTPException: 503 Service Unavailable if no provider scope is active
    """
    if _provider is None or not _provider.active:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Market timer provider not active. Service may still be starting."
        )
    return _provider
