import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from listquery.core.config import settings
from listquery.core.http_logging import install_request_logging
from listquery.api.errors import install_query_error_handlers
from listquery.api.customers import router as customers_router
from listquery.db.session import Base, engine

logging.getLogger("listquery").setLevel(settings.LOG_LEVEL)

if settings.APP_ENV == "local":
    Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME, version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_request_logging(app)
install_query_error_handlers(app)

app.include_router(customers_router, prefix="/api/customers", tags=["Customers"])

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

@app.get("/health")
def health():
    return {"status": "ok"}
