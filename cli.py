import asyncio

import typer
import uvicorn

app = typer.Typer(help="Management commands for the posts API.")


# ---------------------------
# Commands
# ---------------------------
@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload in development."),
):
    """Run the API with uvicorn."""
    from src.core.config import settings

    uvicorn.run(
        "src.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


@app.command()
def init_db():
    """Create the database tables."""
    from src.core.config import settings
    from src.core.database import init_db as create_tables

    asyncio.run(create_tables())
    print(f"✅ Tables created on {settings.ASYNC_DATABASE_URL}")


# ---------------------------
# Entrypoint
# ---------------------------
if __name__ == "__main__":
    app()
