import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from booking.core import config
from booking.core.errors import BookingError, FieldValidationError, error_body, error_status
from booking.database import Base, engine
from booking.models import appointment, buyer, vendor  # noqa: F401
from booking.routes import appointment_routes, party_routes

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

logger = logging.getLogger(__name__)

config.validate_runtime_config()

app = FastAPI(title='Booking API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


def error_response(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=error_status(exc), content=error_body(exc))


@app.exception_handler(BookingError)
async def handle_booking_error(_request: Request, exc: BookingError) -> JSONResponse:
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = '.'.join(str(part) for part in error.get('loc', ()) if part not in ('body', 'query', 'path'))
        messages.append(f"{location} {error.get('msg', 'is invalid')}".strip())
    return error_response(FieldValidationError(messages))


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception('Database error while handling request', exc_info=exc)
    return error_response(exc)


@app.get('/')
def root():
    return {'status': 'Booking API Running'}


app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(party_routes.router)
