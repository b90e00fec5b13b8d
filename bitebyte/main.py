from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from datetime import datetime
import logging

# Load environment variables as early as possible
load_dotenv()

from .config import settings
from .dependencies import get_controller_registry, get_model_config, get_record_store
from .exceptions import BiteByteError, bitebyte_exception_handler, http_exception_handler
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware, RequestSizeLimitMiddleware, SecurityMiddleware
from .routers import analysis_router, ui_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    model_config = get_model_config()
    logger.info(f"Starting {settings.APP_NAME} (analysis: {model_config.provider}/{model_config.model_id})")
    if not get_record_store().remote_enabled:
        logger.warning("BLOB_READ_WRITE_TOKEN is not available. Images will use fallback storage.")
    yield
    # Shutdown
    get_controller_registry().close_all()
    logger.info(f"Shutting down {settings.APP_NAME}...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url=("/docs" if settings.DOCS_ENABLED else None),
    redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
    openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
)

app.add_exception_handler(BiteByteError, bitebyte_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)

app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)

# GZip compression
app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis_router.router)
app.include_router(ui_router.router)


@app.get("/health")
def health_check():
    model_config = get_model_config()
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.utcnow().isoformat(),
        "storage": "remote" if get_record_store().remote_enabled else "local-fallback",
        "analysis_provider": model_config.provider,
        "analysis_model": model_config.model_id,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("bitebyte.main:app", host=settings.HOST, port=settings.PORT)
