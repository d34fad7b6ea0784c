import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.core.exceptions import NotFoundError, NurseShiftError, OutOfRangeError, ValidationError


logger = logging.getLogger(__name__)


def _body(exc: NurseShiftError) -> dict:
    return {"code": exc.code, "message": exc.message, "errors": exc.errors}


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_body(exc))


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_body(exc))


async def out_of_range_handler(request: Request, exc: OutOfRangeError) -> JSONResponse:
    content = _body(exc)
    content.update(
        shiftDate=exc.shift_date.isoformat(),
        startDate=exc.start_date.isoformat(),
        endDate=exc.end_date.isoformat(),
    )
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=content)


async def nurseshift_error_handler(request: Request, exc: NurseShiftError) -> JSONResponse:
    logger.error(f"Unhandled {exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(OutOfRangeError, out_of_range_handler)
    app.add_exception_handler(NurseShiftError, nurseshift_error_handler)
