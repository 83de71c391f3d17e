from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from doclify.api.endpoints import auth
from doclify.api.endpoints import projects
from doclify.api.endpoints import wizard
from doclify.core.config import settings
from doclify.core.logging import configure_logging

configure_logging(settings.log_level)

app = FastAPI(title="Doclify")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(projects.router, prefix="/projects", tags=["projects"])
app.include_router(wizard.router, prefix="/wizard", tags=["wizard"])
