# app/routers/deps.py
# Shared request dependencies; the objects themselves are built in the lifespan
from fastapi import Request

from app.core.config import Settings
from app.services.search_index import LocationIndex


def get_index(request: Request) -> LocationIndex:
    return request.app.state.index


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
