"""Xitzin application factory for the escape room."""

from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from xitzin import Xitzin

from .config import Config
from .engine.loader import load_catalog
from .logging import get_logger
from .session import SessionStore

logger = get_logger(__name__)


def _get_data_path() -> Traversable:
    """Locate the catalog files via importlib.resources (works when installed)."""
    return resources.files("escaperoom.data")


def create_app(config: Config | None = None) -> Xitzin:
    """Create and configure the Xitzin application."""
    config = config or Config.from_env()

    templates_dir = Path(__file__).parent / "templates"

    app = Xitzin(
        title="Escape Room",
        version="0.1.0",
        templates_dir=templates_dir,
    )
    app.state.config = config

    @app.on_startup
    async def startup():
        """Load and check the catalog, then open the session store."""
        catalog = load_catalog(_get_data_path())
        app.state.catalog = catalog
        app.state.sessions = SessionStore(catalog, config.session_options())
        logger.info(
            "catalog_loaded",
            questions=len(catalog.questions),
            room_objects=len(catalog.room_objects),
            levels=len(catalog.themes),
        )
        logger.info("startup_complete")

    from .routes import home, play

    home.register_routes(app)
    play.register_routes(app)

    return app
