## ponto de entrada do FastAPI (app instantiation, middlewares, inclusão de rotas)

# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.constants import APP_NAME, APP_VERSION
from app.core.errors import AppError, app_error_handler
from app.db.session import mask_database_url

# Importe seus roteadores (endpoints)
from app.api.endpoints import auth, users, appointments, public_booking, services, calendars
from app.api.endpoints import medical_records, settings as settings_routes, plans, admin, security
from app.api.endpoints import payment_webhook, agendopro_webhook, notifications

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=APP_NAME,
    description="Backend de agendamentos, planos e notificações do AgendoPro.",
    version=APP_VERSION,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(appointments.router)
app.include_router(public_booking.router)
app.include_router(services.router)
app.include_router(calendars.router)
app.include_router(medical_records.router)
app.include_router(settings_routes.router)
app.include_router(plans.router)
app.include_router(admin.router)
app.include_router(security.router)
app.include_router(payment_webhook.router)
app.include_router(agendopro_webhook.router)
app.include_router(notifications.router)


@app.get("/")
def read_root():
    return {"app_name": app.title, "environment": settings.ENV}


logger = logging.getLogger("startup")


@app.on_event("startup")
def startup_log():
    logger.info("STARTUP env=%s DATABASE_URL=%s", settings.ENV, mask_database_url(settings.DATABASE_URL))

# Para rodar com uvicorn:
# uvicorn app.main:app --reload
