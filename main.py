# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.logging import get_logger, setup_logging
from app.db import Base, engine
from app.middleware.logging import RequestLoggingMiddleware
import app.models as models  # noqa: F401  确保模型注册到 Base

from app.routers import trpc

logger = get_logger("main")


def create_app() -> FastAPI:
    setup_logging(settings.log_level, settings.log_dir, settings.log_json)

    # 如已用 init_db.py 初始化，可保留这行作为幂等保障
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 所有业务都走 /trpc/<procedure>
    app.include_router(trpc.router)

    @app.get("/")
    def ping():
        return {"ok": True, "app": settings.app_name}

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    logger.info("app_created", procedures=sorted(trpc.PROCEDURES))
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=2022, reload=settings.debug)
