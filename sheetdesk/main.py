from fastapi import FastAPI

from .core.config import settings
from .core.init_db import init_db
from .api.routes_datasets import router as datasets_router


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0"
    )

    @app.on_event("startup")
    def on_startup():
        init_db()
        settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # Upload / datasets / rows routes
    app.include_router(datasets_router)

    return app


app = create_app()
