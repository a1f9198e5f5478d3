from fastapi import APIRouter

from steel_detailing.api.routes.tools import steel_layout

api_router = APIRouter()
api_router.include_router(steel_layout.router)
