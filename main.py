from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings
from core.database import Base, engine
from core.logging_config import setup_logging

from employee.router import employee_router
from hierarchy.router import hierarchy_router
import models_bootstrap

setup_logging(settings.LOG_LEVEL)

openapi_tags = [
    {
        "name": "Employees",
        "description": "Employee records",
    },
    {
        "name": "Hierarchy",
        "description": "Manager links, subordinates and hierarchy statistics",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(engine)
    yield


app = FastAPI(openapi_tags=openapi_tags, lifespan=lifespan)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(employee_router, prefix="/api")
app.include_router(hierarchy_router, prefix="/api")


@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}
