from fastapi import APIRouter

# Expose the task and user routers under /api/v1 as well
from ...routers import tasks as tasks_router
from ...routers import users as users_router


api_router = APIRouter(prefix="/api/v1")

# Endpoints become available at /api/v1/task/... and /api/v1/user/...
api_router.include_router(tasks_router.router)
api_router.include_router(users_router.router)


@api_router.get("/", tags=["users"])  # lightweight meta endpoint
def api_info():
    return {
        "name": "Task Manager API",
        "version": "v1",
        "docs": "/docs",
        "user": {
            "register": "/api/v1/user/register",
            "login": "/api/v1/user/login",
            "me": "/api/v1/user/me",
        },
        "task": {
            "new": "/api/v1/task/new",
            "update": "/api/v1/task/update/{id}",
            "delete": "/api/v1/task/delete/{id}",
            "my": "/api/v1/task/my",
        },
    }
