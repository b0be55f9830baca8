from fastapi import APIRouter
from . import auth, users, goals

api_router = APIRouter()
# Auth routes sit at the top level: /signup, /login, /logout, /me
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(goals.router, prefix="/goals", tags=["goals"])
