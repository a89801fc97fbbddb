# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import SessionLocal, init_db
from services import users as users_service
from utils.errors import register_exception_handlers

# Import routerów
from routes.auth import router as auth_router
from routes.users import router as users_router
from routes.stores import router as stores_router
from routes.ratings import router as ratings_router
from routes.logs import router as logs_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _create_default_admin():
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return
    db = SessionLocal()
    try:
        created = users_service.ensure_admin(
            db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.ADMIN_NAME
        )
        if created:
            logger.info("Created default administrator %s", created.email)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Inicjalizacja
    init_db()
    _create_default_admin()
    yield


app = FastAPI(title="Store Ratings API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Rejestracja routerów
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(stores_router)
app.include_router(ratings_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Store Ratings API is running"}
