"""Initialize the PrisonSphere FastAPI application."""

import configparser
import logging
import os
import re
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


class EnvInterpolatingConfigParser(configparser.ConfigParser):
    """ConfigParser that substitutes ${ENV_VAR:-default} syntax.

    An unset variable without a default renders as an empty string.
    """

    def get(self, section, option, **kwargs):  # pylint: disable=arguments-differ
        """Get config value with environment variable interpolation."""
        value = super().get(section, option, **kwargs)
        if value is None:
            return value
        return self._interpolate_env(value)

    def _interpolate_env(self, value):
        """Replace ${VAR} or ${VAR:-default} with environment values."""

        def replacer(match):
            var_name, _, default = match.group(1).partition(":-")
            return os.getenv(var_name.strip(), default.strip())

        return re.sub(r"\$\{([^}]+)\}", replacer, value)


def get_toplevel_path() -> Path:
    """Get project toplevel path."""
    return Path(__file__).parent.parent


def read_server_config():
    """Read configuration file at module load time.

    Config file resolution order:
    1. CONF environment variable (if set) - explicit path override
    2. server.conf (if exists) - local/production config
    3. sample.conf (fallback) - template

    Supports environment variable substitution via ${VAR} or ${VAR:-default} syntax.
    """
    toplevel = get_toplevel_path()

    config_file = os.getenv("CONF")
    if config_file:
        filepath = os.path.join(toplevel, config_file)
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Configuration file '{filepath}' does not exist")
        server_config = EnvInterpolatingConfigParser()
        server_config.read([filepath])
        return server_config

    for config_file in ["server.conf", "sample.conf"]:
        filepath = os.path.join(toplevel, config_file)
        if os.path.exists(filepath):
            server_config = EnvInterpolatingConfigParser()
            server_config.read([filepath])
            return server_config

    raise FileNotFoundError(
        "No configuration file found. "
        "Set CONF environment variable or create server.conf/sample.conf"
    )


config = read_server_config()


def build_log_handlers():
    """Build log handlers."""
    format_ = config.get("logging", "format", raw=True)
    formatter = logging.Formatter(format_)

    handler = RotatingFileHandler(
        config.get("logging", "logfile"),
        maxBytes=config.getint("logging", "rotation_size"),
        backupCount=config.getint("logging", "backup_count", fallback=3),
    )
    handler.setFormatter(formatter)
    yield handler


def configure_root_logger(handlers):
    """Configure the root logger."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    level = logging.getLevelName(config.get("logging", "level"))
    root_logger.setLevel(level)

    for handler in handlers:
        root_logger.addHandler(handler)


def configure_external_loggers(handlers):
    """Configure external loggers."""
    logger_names = ["asyncio", "uvicorn", "sqlalchemy.engine"]
    loggers = (logging.getLogger(name) for name in logger_names)
    for logger in loggers:
        logger.setLevel(logging.ERROR)
        for handler in handlers:
            logger.addHandler(handler)


def configure_logging():
    """Attach the configured handlers to the root and external loggers."""
    handlers = list(build_log_handlers())
    configure_root_logger(handlers)
    configure_external_loggers(handlers)


def get_allowed_origins() -> list[str]:
    """Parse the comma separated CORS origins setting."""
    origins = config.get("server", "allowed_origins", fallback="*")
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


configure_logging()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Start the background sweeps for the lifetime of the application."""
    from .sweeps import Sweeper  # pylint: disable=import-outside-toplevel

    sweeper = Sweeper.from_config(config)
    sweeper.start()
    try:
        yield
    finally:
        await sweeper.stop()


app = FastAPI(
    title="PrisonSphere API",
    description="Correctional facility records: inmates, visitors, parole and rehabilitation.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
