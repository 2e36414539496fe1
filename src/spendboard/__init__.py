"""SpendBoard application factory."""

from __future__ import annotations

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def create_app(config_name: str | None = None, config: BaseConfig | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["SPENDBOARD_CONFIG"] = config_obj

    from .logging_config import setup_logging

    setup_logging(config_obj)

    from .api import bp as api_bp

    app.register_blueprint(api_bp, url_prefix=config_obj.API_PREFIX)

    # Import init_db lazily so importing the package does not build SQLModel
    # metadata for callers that only need the client-side state layer.
    from .extensions import init_db

    init_db(app)
    _cli.init_app(app)
    return app


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
