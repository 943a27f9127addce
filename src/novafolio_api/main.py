"""Main FastAPI application for the NovaFolio API."""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config.settings import get_settings, Settings
from .infrastructure.database import DatabaseClient, PageStore
from .infrastructure.extraction import TextExtractor
from .infrastructure.storage import BlobStore
from .core.case_manager import CaseManager
from .core.client_manager import ClientManager
from .core.document_manager import DocumentManager
from .core.indexing_queue import IndexingQueue
from .core.job_manager import JobManager
from .core.page_index import PageIndex
from .core.search_manager import SearchManager
from .api.errors import register_exception_handlers
from .api.routes import cases, clients, documents, jobs, search
from .models import HealthResponse, TenantContext

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.service_name} v{__version__}")

    logger.info("Initializing database...")
    db_client = DatabaseClient(
        settings.database_url,
        search_config=settings.search_config,
        pool_size=settings.db_pool_size,
        startup_retries=settings.startup_retries,
        startup_retry_delay=settings.startup_retry_delay,
        name_similarity_threshold=settings.name_similarity_threshold,
    )
    await db_client.initialize()

    tenant_row = await db_client.ensure_tenant(settings.default_tenant_name)
    tenant = TenantContext(id=tenant_row.id, name=tenant_row.name)
    logger.info(f"Using tenant {tenant.name} ({tenant.id})")

    blob_store = app.state.blob_store
    blob_store.ensure_root()

    page_store = PageStore(db_client)
    page_index = PageIndex(page_store, TextExtractor())
    job_manager = JobManager()
    await job_manager.start_cleanup_task()

    indexing_queue = IndexingQueue(
        page_index,
        job_manager,
        workers=settings.indexing_workers,
        maxsize=settings.indexing_queue_size,
        max_retries=settings.indexing_max_retries,
        retry_backoff=settings.indexing_retry_backoff,
    )
    indexing_queue.start()

    app.state.db_client = db_client
    app.state.tenant = tenant
    app.state.page_index = page_index
    app.state.job_manager = job_manager
    app.state.indexing_queue = indexing_queue
    app.state.client_manager = ClientManager(db_client, blob_store, tenant)
    app.state.case_manager = CaseManager(db_client, blob_store, tenant)
    app.state.document_manager = DocumentManager(db_client, blob_store, indexing_queue, tenant)
    app.state.search_manager = SearchManager(
        page_store,
        tenant,
        default_limit=settings.default_search_limit,
        max_limit=settings.max_search_limit,
        snippet_lead=settings.snippet_lead,
        snippet_length=settings.snippet_length,
    )

    if settings.sweep_orphans_on_startup:
        await app.state.document_manager.reconcile_storage(settings.orphan_grace_seconds)

    logger.info(f"{settings.service_name} is ready")

    yield

    # Cleanup
    logger.info("Shutting down...")
    await indexing_queue.stop()
    await job_manager.stop_cleanup_task()
    await db_client.close()
    logger.info("Shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; ``settings`` defaults to the environment."""
    settings = settings or get_settings()

    app = FastAPI(
        title="NovaFolio API",
        description="Clients, cases and documents with per-page full-text search",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.blob_store = BlobStore(settings.storage_dir, settings.public_files_prefix)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(clients.router)
    app.include_router(cases.router)
    app.include_router(documents.router)
    app.include_router(search.router)
    app.include_router(jobs.router)

    app.mount(
        app.state.blob_store.public_prefix,
        StaticFiles(directory=str(app.state.blob_store.resolve_root()), check_dir=False),
        name="files",
    )

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint."""
        db_connected = await request.app.state.db_client.ping()
        return HealthResponse(
            status="healthy" if db_connected else "degraded",
            service=settings.service_name,
            version=__version__,
            database_connected=db_connected,
            indexing=request.app.state.indexing_queue.stats(),
        )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.service_name,
            "version": __version__,
            "status": "running"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "novafolio_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development"
    )
