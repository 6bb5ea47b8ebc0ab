"""GraphQL facade service over the Mode REST API."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from strawberry.fastapi import GraphQLRouter

from mode_graphql.schema import schema
from mode_rest.client import ModeClient
from shared.config import Settings, load_settings
from shared.logger import configure_logging, get_logger

logger = get_logger(__name__)


async def get_context(request: Request) -> dict:
    """Expose the shared Mode client to resolvers."""
    return {"mode_client": request.app.state.mode_client}


def create_app(settings: Optional[Settings] = None, mode_client: Optional[ModeClient] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings; read from the environment when omitted
        mode_client: Upstream client; built from settings when omitted

    Returns:
        Configured FastAPI app with /graphql and /health
    """
    settings = settings or load_settings()
    client = mode_client or ModeClient(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage the upstream connection pool."""
        await client.connect()
        logger.info("mode_graphql_started", port=settings.port, base_url=settings.base_url)

        yield

        await client.disconnect()
        logger.info("mode_graphql_shutdown")

    app = FastAPI(
        title="Mode GraphQL API",
        description="GraphQL facade over the Mode Analytics REST API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.mode_client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    graphql_app = GraphQLRouter(schema, context_getter=get_context)
    app.include_router(graphql_app, prefix="/graphql")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "mode_graphql"}

    return app


settings = load_settings()
configure_logging(environment=settings.environment, level=settings.log_level)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
