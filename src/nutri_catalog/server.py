from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import config
from .api.dependencies import get_food_lookup
from .api.routes.foods import router as foods_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Load the catalog before the first request instead of on it
    get_food_lookup()
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Food Catalog API", lifespan=lifespan)
    app.include_router(foods_router)
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=config.PORT)
