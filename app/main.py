from fastapi import FastAPI

from app.api.errors import register_exception_handlers
from app.api.routes import audit, contracts, dashboard, expenses, shifts
from app.core.config import settings
from app.core.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="NurseShift API", version="0.1.0", debug=settings.DEBUG)

register_exception_handlers(app)

app.include_router(contracts.router, prefix="/api/v1")
app.include_router(shifts.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")
app.include_router(audit.router, prefix="/api/v1")
app.include_router(expenses.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "ok"}
