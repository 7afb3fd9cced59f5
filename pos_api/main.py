# Main application file



import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pos_api.core.rate_limiter import limiter
from pos_api.core.config import settings
from pos_api.core.error_handlers import register_error_handlers
from pos_api.routers import (
    auth,
    products,
    customers,
    shifts,
    transactions,
    returns,
    analytics,
    users,
)


# LOGGING CONFIGURATION

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("pos_api")


# APP INIT

app = FastAPI(
    title="POS Settlement API",
    description="Checkout, shift cash management, returns and sales analytics for a single store",
    version="1.0.0",
)



# CORS (Token-based auth)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# RATE LIMITING

app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    _rate_limit_exceeded_handler
)


# ERROR HANDLING

register_error_handlers(app)


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(auth.router)
app.include_router(products.router)
app.include_router(customers.router)
app.include_router(shifts.router)
app.include_router(transactions.router)
app.include_router(returns.router)
app.include_router(analytics.router)
app.include_router(users.router)



# HEALTH

@app.get("/health")
def health():
    return {"status": "ok"}
