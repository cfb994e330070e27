# cartshop/main.py
# Точка входа FastAPI. Создание таблиц выполняется при старте с повторными попытками.

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cartshop.db.session import engine
from cartshop.db.base import Base
from cartshop.core.config import settings
from cartshop.core.errors import ShopError
from cartshop.api import auth as auth_router
from cartshop.api import cart as cart_router
from cartshop.api import orders as orders_router
from cartshop.api import products as products_router

# Импорт моделей, чтобы SQLAlchemy видел их определения
import cartshop.models.user
import cartshop.models.product
import cartshop.models.cart
import cartshop.models.order

# Настройка логирования
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def try_create_tables(retries: int = 5, delay: int = 2) -> bool:
    """
    Пытаемся создать таблицы с повторными попытками.
    Если БД недоступна, логируем ошибку и пробуем снова.

    Args:
        retries: Количество попыток подключения
        delay: Задержка между попытками в секундах

    Returns:
        True если таблицы созданы/существуют, False если все попытки исчерпаны
    """
    for attempt in range(1, retries + 1):
        try:
            logger.info(f"Creating tables ({attempt}/{retries})...")
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables created (or already exist).")
            return True
        except Exception as e:
            logger.warning(f"Attempt {attempt}/{retries} failed to create tables: {e}")
            if attempt < retries:
                logger.info(f"Waiting {delay}s before retry...")
                time.sleep(delay)
    logger.error(f"Could not create tables after {retries} retries.")
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Управление жизненным циклом приложения.
    Запускается при старте и завершении приложения.
    """
    logger.info("cartshop starting up...")
    if not try_create_tables(retries=5, delay=2):
        # В продакшене без таблиц не стартуем, в разработке продолжаем
        if settings.ENVIRONMENT in ("production", "prod"):
            raise RuntimeError("Cannot start application: database tables creation failed")
        logger.error("Failed to create database tables. Application may not work correctly.")

    yield

    logger.info("cartshop shutting down...")
    engine.dispose()


app = FastAPI(
    title="cartshop API",
    description="Каталог, корзина и оформление заказов",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware для разработки (ограничить в продакшене!)
if settings.ENVIRONMENT == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["https://yourdomain.com"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

# Подключаем роутеры
app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])
app.include_router(products_router.router, prefix="/api/products", tags=["products"])
app.include_router(cart_router.router, prefix="/api/cart", tags=["cart"])
app.include_router(orders_router.checkout_router, prefix="/api/checkout", tags=["checkout"])
app.include_router(orders_router.router, prefix="/api/orders", tags=["orders"])


@app.get("/", tags=["health"])
async def root():
    """Базовый health check."""
    return {
        "status": "ok",
        "service": "cartshop API",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["health"])
async def health():
    return {
        "status": "healthy",
        "version": "1.0.0"
    }


@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    """Доменные ошибки: валидация, not found, бизнес-правила, доступ."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "error": exc.kind, "message": exc.message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Глобальный обработчик ошибок."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "status": "error",
            "error": "internal",
            "message": str(exc) if settings.ENVIRONMENT == "development" else "Internal server error",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cartshop.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower()
    )
