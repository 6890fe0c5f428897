"""Edge Cases RSVP web application."""
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import get_settings
from app.core.errors import TransportError
from app.mail.dispatcher import MailDispatcher
from app.routes import diagnostics, rsvp

settings = get_settings()

# Configure logging
log_dir = Path(settings.log_dir)
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)


async def verify_relay(dispatcher: MailDispatcher) -> None:
    """Check the relay once; a failure is logged and sends are still attempted."""
    try:
        await dispatcher.verify()
        logger.info("Email transporter is ready to send emails")
    except TransportError as e:
        logger.error(f"Email transporter verification failed ({e.kind.value}): {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    # Startup
    logger.info(f"Starting {settings.app_name} on port {settings.port}")
    logger.info(f"Email user: {'configured' if settings.email_user else 'MISSING'}")
    logger.info(f"Email pass: {'configured' if settings.email_pass else 'MISSING'}")
    verification = None
    if settings.verify_on_startup:
        verification = asyncio.create_task(verify_relay(MailDispatcher(settings)))
    yield
    # Shutdown
    if verification and not verification.done():
        verification.cancel()
    logger.info(f"{settings.app_name} shut down")


app = FastAPI(
    title=settings.app_name,
    description="RSVP intake for the Edge Cases Soirée: notifies the organisers and emails attendees a calendar invite",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for the public form
origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    """Answer unparseable request bodies with the same shape as other 400s."""
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


# Include routers
app.include_router(rsvp.router)
app.include_router(diagnostics.router)

# Mount static files last so API routes take precedence
if Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
