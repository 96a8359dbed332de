from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from stitchbook.config import settings
from stitchbook.core.database import engine, Base
from stitchbook.core.errors import ServiceError, TransientStoreError
from stitchbook.core.logging_config import setup_logging, get_logger
from stitchbook import models  # noqa: F401  регистрирует таблицы в Base.metadata
from stitchbook.api.auth import router as auth_router
from stitchbook.api.rates import router as rates_router
from stitchbook.api.stitch_entries import router as stitch_entries_router
from stitchbook.api.production import router as production_router
from stitchbook.api.workers import router as workers_router
from stitchbook.api.worker_categories import router as worker_categories_router
from stitchbook.api.staff import router as staff_router
from stitchbook.api.payments import router as payments_router
from stitchbook.api.products import router as products_router
from stitchbook.api.inventory import router as inventory_router

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Таблицы БД проверены/созданы")
    yield
    await engine.dispose()


app = FastAPI(title="Stitchbook: сдельная оплата швейного цеха", version="1.0.0", lifespan=lifespan)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def store_unavailable_handler(request: Request, exc: Exception):
    logger.exception("Хранилище недоступно: %s", exc)
    err = TransientStoreError("Хранилище недоступно, повторите запрос")
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Необработанная ошибка: %s", exc)
    detail = "Внутренняя ошибка сервера"
    err_str = str(exc).lower()
    if "duplicate key" in err_str or "unique constraint" in err_str:
        detail = "Конфликт данных (дубликат). Обновите страницу и повторите."
    elif "foreign key" in err_str or "violates foreign key" in err_str:
        detail = "Ошибка связи с данными (например, сотрудник не найден)."
    return JSONResponse(
        status_code=500,
        content={"detail": detail},
    )


_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(auth_router)
app.include_router(rates_router)
app.include_router(stitch_entries_router)
app.include_router(production_router)
app.include_router(workers_router)
app.include_router(worker_categories_router)
app.include_router(staff_router)
app.include_router(payments_router)
app.include_router(products_router)
app.include_router(inventory_router)


@app.get("/health")
def health():
    return {"status": "ok"}
