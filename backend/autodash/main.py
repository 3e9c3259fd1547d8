"""
autodash API

Upload a spreadsheet, CSV or JSON payload and get back a typed dataset
profile, filtered rows, column statistics and quick local insights.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import datasets
from .core.config import settings
from .middleware import ErrorHandlerMiddleware, RequestLoggerMiddleware
from .services.dataset_store import dataset_store

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("autodash")

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggerMiddleware)
app.add_middleware(ErrorHandlerMiddleware)

app.include_router(datasets.router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "datasets": len(dataset_store),
    }


logger.info("%s v%s ready (prefix %s)", settings.APP_NAME, settings.APP_VERSION, settings.API_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("autodash.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
