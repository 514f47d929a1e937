"""
Bookstore API Application

Catalog browsing and order placement for the online bookstore.
Orders are priced from the catalog and checked against the client's total.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import Settings, get_settings
from .core.exceptions import BookstoreError
from .database import BookDatabase, OrderDatabase
from .routes import books_router, orders_router
from .services import NotificationService, OrderService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process"""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{success: false, error, message, details?}``"""

    @app.exception_handler(BookstoreError)
    async def bookstore_error_handler(request: Request, exc: BookstoreError):
        logger.warning(
            f"{request.method} {request.url.path} -> {exc.status_code}: {exc.error} ({exc.message})"
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning(f"{request.method} {request.url.path} -> 400: validation failed {details}")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Validation failed",
                "message": "Please check your input data",
                "details": details,
            },
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} -> 500")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to process request",
                "message": str(exc),
            },
        )


def create_app(
    settings: Optional[Settings] = None,
    book_db: Optional[BookDatabase] = None,
    order_db: Optional[OrderDatabase] = None,
    notifications: Optional[NotificationService] = None,
) -> FastAPI:
    """Build the API with its stores and order service wired onto ``app.state``"""
    settings = settings or get_settings()
    book_db = book_db if book_db is not None else BookDatabase(seed=settings.seed_catalog)
    order_db = order_db if order_db is not None else OrderDatabase()
    notifications = notifications or NotificationService(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        logger.info(f"{settings.app_name} starting up...")
        logger.info(f"Catalog: {len(book_db.books)} books")
        logger.info(f"Mail notifications: {'enabled' if notifications.mailer else 'disabled'}")
        yield
        logger.info(f"{settings.app_name} shutting down...")

    app = FastAPI(
        title=settings.app_name,
        description="Online bookstore catalog and order API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.book_db = book_db
    app.state.order_db = order_db
    app.state.order_service = OrderService(
        book_db=book_db,
        order_db=order_db,
        price_tolerance=settings.price_tolerance,
        post_commit_hooks=notifications.hooks(),
    )

    register_exception_handlers(app)
    app.include_router(books_router)
    app.include_router(orders_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"success": True, "status": "healthy", "service": "bookstore-api"}

    @app.get("/api")
    async def api_index():
        """API endpoint index"""
        return {
            "success": True,
            "message": settings.app_name,
            "version": "1.0.0",
            "endpoints": {
                "books": {
                    "GET /api/books": "List books with pagination and filtering",
                    "GET /api/books/{id}": "Get book by ID",
                    "GET /api/books/search?q=": "Search books",
                    "GET /api/books/class/{class}": "Get books by class/genre",
                    "GET /api/books/classes": "Get available book classes",
                },
                "orders": {
                    "POST /api/orders": "Create new order",
                    "GET /api/orders/{id}": "Get order by ID",
                    "GET /api/orders/customer/{email}": "Get orders by customer email",
                },
            },
        }

    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookstore.main:app",
        host=get_settings().host,
        port=get_settings().port,
        reload=get_settings().debug,
    )
