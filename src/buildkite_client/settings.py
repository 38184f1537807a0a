"""Logging setup and configuration loading for Buildkite API clients."""

import logging
import os
import pathlib
from collections.abc import Callable, Mapping
from typing import Any

import pydantic
import structlog
from structlog.typing import Processor

from .buildkiteapi.config import ClientConfig

ORGANIZATION_ENV_VARS = ("BUILDKITE_ORGANIZATION_SLUG", "BUILDKITE_ORGANIZATION")
API_TOKEN_ENV_VAR = "BUILDKITE_API_TOKEN"
GRAPHQL_URL_ENV_VAR = "BUILDKITE_GRAPHQL_URL"
REST_URL_ENV_VAR = "BUILDKITE_REST_URL"

_config_file_adapter = pydantic.TypeAdapter(dict[str, Any])


def configure_logging(
    log_level_name: str = "INFO",
    *,
    renderer: Processor | None = None,
    logger_factory: Callable[..., Any] | None = None,
) -> None:
    """Route client logs through structlog.

    Args:
        log_level_name: Minimum level to emit. Unknown names mean INFO.
        renderer: Final processor. Defaults to logfmt with the timestamp,
            level and message keys first.
        logger_factory: structlog logger factory. Defaults to printing to
            stdout.
    """
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    if renderer is None:
        renderer = structlog.processors.LogfmtRenderer(key_order=("timestamp", "level", "msg"))
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=logger_factory or structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def _env_values(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect the ClientConfig fields that are set in ``environ``."""
    values = {}
    if org := next((environ[name] for name in ORGANIZATION_ENV_VARS if environ.get(name)), None):
        values["org"] = org
    if token := environ.get(API_TOKEN_ENV_VAR):
        values["api_token"] = token
    if url := environ.get(GRAPHQL_URL_ENV_VAR):
        values["graphql_url"] = url
    if url := environ.get(REST_URL_ENV_VAR):
        values["rest_url"] = url
    return values


def load_config(
    config_path: str | pathlib.Path,
    environ: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Load client configuration from a JSON file.

    Fields the file leaves out are taken from the same environment variables
    :func:`config_from_env` reads, so the API token can stay out of the file.
    Values in the file win.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file is not a JSON object or the
            merged configuration is invalid.
    """
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    data = _config_file_adapter.validate_json(path.read_text())
    environ = os.environ if environ is None else environ
    return ClientConfig.model_validate({**_env_values(environ), **data})


def config_from_env(environ: Mapping[str, str] | None = None) -> ClientConfig:
    """Build client configuration from environment variables.

    The organization is read from ``BUILDKITE_ORGANIZATION_SLUG``, falling
    back to the legacy ``BUILDKITE_ORGANIZATION``. Endpoint URLs are only
    overridden when their variables are set.

    Raises:
        pydantic.ValidationError: If the organization or token is missing.
    """
    environ = os.environ if environ is None else environ
    return ClientConfig.model_validate(_env_values(environ))
