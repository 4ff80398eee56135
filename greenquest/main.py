from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from greenquest.config import Config, configure_logging
from greenquest.database.connection import init_db, make_engine, make_session_factory
from greenquest.errors import register_error_handlers
from greenquest.routes import assistant, auth, player, shop
from greenquest.services.catalog import default_catalog
from greenquest.services.llm import GroqClient

logger = logging.getLogger(__name__)


def create_app(database_url: Optional[str] = None, llm_client: Optional[GroqClient] = None) -> FastAPI:
    app = FastAPI(title="GreenQuest")
    if Config.CORS_ORIGINS == ["*"]:
        # credentialed requests cannot use a literal "*", so echo the origin back
        app.add_middleware(
            CORSMiddleware, allow_origin_regex=".*", allow_credentials=True, allow_methods=["*"], allow_headers=["*"]
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=Config.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    engine = make_engine(database_url or Config.DATABASE_URL)
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.catalog = default_catalog()
    app.state.llm_client = llm_client or GroqClient.from_config()

    register_error_handlers(app)

    @app.get("/api/ping")
    async def ping() -> dict:
        return {"ok": True}

    app.include_router(auth.router)
    app.include_router(player.router)
    app.include_router(shop.router)
    app.include_router(assistant.router)

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db(engine)
        logger.info("GreenQuest started with %s catalog items", len(app.state.catalog))

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=Config.PORT)
