import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pooltable.logging_config import configure_logging
from pooltable.routers.pools import limiter, router as pools_router

configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="pooltable – Stake Pool Table Builder",
    description="Builds the website's stake-pool table from upstream pool APIs and page data.",
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(pools_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from pooltable"}
