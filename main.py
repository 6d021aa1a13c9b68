import os
import importlib
import logging
from pathlib import Path
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config.logging_config import configure_logging
from config.settings import settings
from models.index import init_db

configure_logging()
logger = logging.getLogger(__name__)

ROOT = Path(__file__).parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    # schema is owned by alembic in production; create_all keeps local sqlite usable
    if not settings.is_production:
        init_db()
    logger.info("%s started env=%s", settings.APP_NAME, settings.ENVIRONMENT)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS: use our parsed list
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type"],
)


#load all routes
def load_routes(directory: Path):
    routers = []
    for item in sorted(directory.rglob("*_routes.py")):
        module_name = ".".join(item.relative_to(ROOT).with_suffix("").parts)
        module = importlib.import_module(module_name)
        if hasattr(module, "router"):
            routers.append(module.router)
    return routers


for router in load_routes(ROOT / "api"):
    app.include_router(router, prefix="/api")


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/")
def home():
    return {"message": f"Welcome to {settings.APP_NAME}"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", settings.PORT))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=settings.DEBUG)
