from fastapi import FastAPI

from credit_ledger.entrypoints.http.exception_handlers import register_exception_handlers
from credit_ledger.entrypoints.http.routes.credit_accounts import router as credit_accounts_router
from credit_ledger.entrypoints.http.routes.establishments import router as establishments_router
from credit_ledger.entrypoints.http.routes.health import router as health_router
from credit_ledger.entrypoints.http.routes.transactions import router as transactions_router
from credit_ledger.infra.config import log_level
from credit_ledger.infra.logging import configure_logging


def build_app() -> FastAPI:
    configure_logging(log_level())

    app = FastAPI(
        title="Credit Ledger API",
        description="""
        Credit account ledger for establishments and their clients.

        ## Features
        - Open credit accounts (revolving SHORT_TERM or installment LONG_TERM)
        - Post purchases and payments (cash, YAPE, PLIN)
        - Accrue interest and apply late fees
        - Account summaries and statements

        ## Authentication
        Currently no authentication required (development phase).

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc alternative
        openapi_url="/openapi.json",  # OpenAPI schema
    )

    # Register global exception handlers
    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(credit_accounts_router, prefix="/v1")
    app.include_router(transactions_router, prefix="/v1")
    app.include_router(establishments_router, prefix="/v1")

    return app


app = build_app()
