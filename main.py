from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from config import settings
from database import RecordStore
from errors import CredentialsInvalid, InventoryError, NotFoundError, StoreUnavailable, ValidationError
from logging_config import configure_logging, get_logger
from crud.api.v1.endpoints import inventory, transactions, users, reports

configure_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    CredentialsInvalid: 401,
    NotFoundError: 404,
    StoreUnavailable: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    store: Optional[RecordStore] = getattr(app.state, "store", None)
    if store is None:
        store = RecordStore(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        app.state.store = store
    if not store.initialized:
        # StoreUnavailable here stops the application from starting
        store.init(
            admin_username=settings.ADMIN_USERNAME,
            admin_password=settings.ADMIN_PASSWORD,
            admin_display_name=settings.ADMIN_DISPLAY_NAME,
        )
    yield
    store.dispose()


def create_app(store: Optional[RecordStore] = None) -> FastAPI:
    app = FastAPI(title="Medical Supply Inventory API", version="0.1.0", lifespan=lifespan)
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        status_code = ERROR_STATUS.get(type(exc), 400)
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.middleware("http")
    async def exception_handling(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception("Error processing %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={"detail": f"Internal server error occurred: {str(e)}"}
            )

    app.include_router(users.router, prefix="/api/v1/users", tags=["users"])
    app.include_router(inventory.router, prefix="/api/v1/items", tags=["inventory"])
    app.include_router(transactions.router, prefix="/api/v1/transactions", tags=["transactions"])
    app.include_router(reports.router, prefix="/api/v1/reports", tags=["reports"])

    @app.get("/health", tags=["system"])
    def health_check():
        store = app.state.store
        return {
            "status": "ok" if store is not None and store.initialized else "unavailable",
            "timestamp": datetime.now().isoformat(),
        }

    return app


app = create_app()

if __name__ == '__main__':
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=False)
