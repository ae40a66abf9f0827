"""
In-memory sliding-window rate limiting
"""
import time
from collections import defaultdict, deque
from fastapi import Request, HTTPException
from typing import Deque, Dict, Tuple
import logging

from app.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    In-memory rate limiter keyed by client and scope
    Production: Use Redis for distributed rate limiting
    """
    
    def __init__(self, requests_per_minute: int = 60, requests_per_hour: int = 1000):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        
        # {(scope, client_id): timestamps}
        self._hits: Dict[Tuple[str, str], Deque[float]] = defaultdict(deque)
        # {scope: longest window in seconds}
        self._scope_windows: Dict[str, int] = {}
    
    def _get_client_id(self, request: Request) -> str:
        """Extract client identifier from request"""
        if hasattr(request.state, "user_id"):
            return str(request.state.user_id)
        
        return request.client.host if request.client else "unknown"
    
    def _count_recent(self, hits: Deque[float], window_seconds: int, now: float) -> int:
        return sum(1 for ts in hits if ts > now - window_seconds)
    
    def _cleanup_old_entries(self, now: float) -> None:
        """Drop timestamps outside their scope window and remove idle clients"""
        for key in list(self._hits.keys()):
            hits = self._hits[key]
            cutoff = now - self._scope_windows.get(key[0], 0)
            while hits and hits[0] <= cutoff:
                hits.popleft()
            
            if not hits:
                del self._hits[key]
    
    def hit(self, client_id: str, scope: str, limits: Tuple[Tuple[int, int], ...]) -> None:
        """
        Record a request unless it would exceed one of the limits
        
        Args:
            client_id: Client identifier
            scope: Independent counter namespace
            limits: (max_requests, window_seconds) pairs
            
        Raises:
            HTTPException: 429 if a limit is exceeded
        """
        now = time.time()
        self._scope_windows[scope] = max(window for _, window in limits)
        self._cleanup_old_entries(now)
        
        hits = self._hits[(scope, client_id)]
        
        for max_requests, window in limits:
            if self._count_recent(hits, window, now) >= max_requests:
                logger.warning(f"Rate limit exceeded ({scope}, {window}s): {client_id}")
                raise HTTPException(
                    status_code=429,
                    detail={
                        "error": "rate_limit_exceeded",
                        "message": f"Too many requests. Limit: {max_requests} per {window} seconds",
                        "retry_after": window
                    }
                )
        
        hits.append(now)
    
    async def check_rate_limit(self, request: Request) -> None:
        """Global per-client limit applied by middleware"""
        self.hit(
            self._get_client_id(request),
            "global",
            ((self.requests_per_minute, 60), (self.requests_per_hour, 3600)),
        )
    
    async def limit_quiz_generation(self, request: Request) -> None:
        """Route dependency: quiz generation calls the LLM, so it gets a tighter budget"""
        self.hit(
            self._get_client_id(request),
            "quiz_generation",
            ((settings.QUIZ_STARTS_PER_MINUTE, 60),),
        )


# Global instance
rate_limiter = RateLimiter(
    requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    requests_per_hour=settings.RATE_LIMIT_PER_HOUR
)
