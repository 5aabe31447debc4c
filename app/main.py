from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.cache import close_redis_pool
from app.core.config import settings
from app.core.errors import MatchingError
from app.core.logging import configure_logging, RequestContextMiddleware
from app.api.v1 import discovery, match_actions, matches, blocks

configure_logging(settings.app_env)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_redis_pool()


app = FastAPI(
    title="Matching & Discovery API",
    description="Discovery feed, like/pass/super-like actions, mutual matches and undo",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)


@app.exception_handler(MatchingError)
async def matching_error_handler(request: Request, exc: MatchingError):
    """Render domain errors as {"detail", "code"} so clients can branch on code"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=exc.headers,
    )


# Include API routers
app.include_router(discovery.router, prefix="/api/v1/discovery", tags=["Discovery"])
app.include_router(match_actions.router, prefix="/api/v1/match-actions", tags=["Match Actions"])
app.include_router(matches.router, prefix="/api/v1/matches", tags=["Matches"])
app.include_router(blocks.router, prefix="/api/v1/blocks", tags=["Blocks"])


@app.get("/healthz")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "version": "1.0.0"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "Matching & Discovery API", "docs": "/docs"}
