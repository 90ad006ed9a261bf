import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mxwll.db.lifespan import lifespan
from mxwll.api.v1.router import api_router
from mxwll.core.config import CORS_ORIGINS

logger = logging.getLogger(__name__)

app = FastAPI(
    title="MXWLL Satellite Tracking API",
    description="TLE data, SGP4 positions, ground tracks and satellites above an observer.",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
# The globe renderer runs on a separate origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
    expose_headers=["X-Cache-Status"],
)
logger.info(f"CORS enabled for {CORS_ORIGINS}")


@app.get("/ping", tags=["Health"])
async def ping():
    return {"message": "pong"}


app.include_router(api_router, prefix="/api/v1")


@app.get("/", tags=["Root"])
async def read_root():
    """Service name and where the satellite endpoints live"""
    return {
        "message": "MXWLL Satellite Tracking API",
        "satellites": "/api/v1/satellites",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    # Normally started with `uvicorn mxwll.main:app` from the backend directory
    uvicorn.run(app, host="0.0.0.0", port=8000)
