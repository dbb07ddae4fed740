import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookshop.config import settings
from bookshop.database import create_db_and_tables
from bookshop.exceptions import BookshopError
from bookshop.routes import cart, checkout, health, orders, payments

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Bookshop Orders API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BookshopError)
async def bookshop_error_handler(request: Request, exc: BookshopError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(payments.router, prefix="/payments", tags=["Payments"])


@app.get("/")
def root():
    return {
        "cart": [
            "/cart/user/{user_id}", "/cart/add", "/cart/update",
            "/cart/remove/user/{user_id}/book/{book_id}", "/cart/clear/user/{user_id}"
        ],
        "checkout": ["/checkout"],
        "orders": [
            "/orders", "/orders/{order_id}", "/orders/user/{user_id}",
            "/orders/status/{status}", "/orders/{order_id}/status"
        ],
        "payments": [
            "/payments/create/{order_id}", "/payments/complete/{order_id}",
            "/payments/status/{order_id}"
        ],
    }
