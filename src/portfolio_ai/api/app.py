"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_ai.api.routes import router
from portfolio_ai.clients.llm_client import LLMClient
from portfolio_ai.config import AppConfig, load_config
from portfolio_ai.logging_config import setup_logging
from portfolio_ai.profile.models import CandidateProfile
from portfolio_ai.profile.store import ProfileNotFoundError, load_profile
from portfolio_ai.safety.errors import GuardError, QuotaExceeded
from portfolio_ai.safety.guard import RequestGuard, rate_limit_headers
from portfolio_ai.safety.store import RateLimitStore

logger = logging.getLogger(__name__)


def build_guard(config: AppConfig) -> RequestGuard:
    """Create the request guard over the storage named in config."""
    store = RateLimitStore.from_uri(config.rate_limit.storage_uri)
    return RequestGuard(store, key_scope=config.rate_limit.key_scope)


class AppServices:
    """Collaborators shared by the route handlers.

    The LLM client and the profile are created on first use so that the
    PDF and health endpoints work without an API key.
    """

    def __init__(
        self,
        config: AppConfig,
        guard: RequestGuard,
        llm: LLMClient | None = None,
        profile: CandidateProfile | None = None,
    ):
        self.config = config
        self.guard = guard
        self._llm = llm
        self._profile = profile

    @property
    def llm(self) -> LLMClient:
        if self._llm is None:
            self._llm = LLMClient(
                timeout=self.config.llm.timeout,
                max_retries=self.config.llm.max_retries,
            )
        return self._llm

    @property
    def profile(self) -> CandidateProfile:
        if self._profile is None:
            self._profile = load_profile(self.config.server.profile_path)
        return self._profile

    @property
    def has_profile(self) -> bool:
        if self._profile is not None:
            return True
        try:
            self.profile
        except ProfileNotFoundError:
            return False
        return True


async def _check_storage_periodically(guard: RequestGuard, interval: float) -> None:
    """Check the rate limit storage every interval until cancelled.

    Each check runs in a worker thread. A failed check is logged and the
    loop keeps going.
    """
    while True:
        await asyncio.sleep(interval)
        try:
            await asyncio.to_thread(guard.check_storage)
        except Exception:
            logger.error("Rate limit storage check failed", exc_info=True)


def create_app(
    config: AppConfig | None = None,
    llm: LLMClient | None = None,
    guard: RequestGuard | None = None,
    profile: CandidateProfile | None = None,
) -> FastAPI:
    """Build the API with its guard, services and error handlers."""
    config = config or load_config()
    setup_logging(config.server.log_level)
    guard = guard or build_guard(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        interval = config.rate_limit.health_check_interval_seconds
        task = asyncio.create_task(_check_storage_periodically(guard, interval))
        logger.info("Rate limit storage check every %ds", interval)
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    app = FastAPI(title="Portfolio AI", lifespan=lifespan)
    app.state.services = AppServices(config, guard, llm=llm, profile=profile)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-RateLimit-Remaining", "X-RateLimit-Reset"],
    )

    @app.exception_handler(GuardError)
    async def _guard_error(request: Request, exc: GuardError) -> JSONResponse:
        if isinstance(exc, QuotaExceeded):
            headers = rate_limit_headers(0, exc.reset_at)
        else:
            decision = getattr(request.state, "quota", None)
            headers = decision.headers() if decision is not None else {}
        return JSONResponse({"error": exc.message}, status_code=exc.status_code, headers=headers)

    @app.exception_handler(ProfileNotFoundError)
    async def _missing_profile(request: Request, exc: ProfileNotFoundError) -> JSONResponse:
        logger.error("%s", exc)
        return JSONResponse({"error": "Candidate profile is not available."}, status_code=503)

    app.include_router(router)
    return app
