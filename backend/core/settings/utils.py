"""
Utility functions for Django settings configuration.

Environment-specific configuration loading built on python-decouple. Each
deployment environment reads its own ``.env.*`` file from the repository root
and falls back to the process environment when that file is absent.
"""

import logging
from pathlib import Path

from decouple import Config, RepositoryEnv
from decouple import config as default_config

logger = logging.getLogger(__name__)

ENV_FILES = {
    "development": ".env.dev",
    "production": ".env.production",
    "test": ".env.test",
}

REPOSITORY_ROOT = Path(__file__).resolve().parent.parent.parent.parent


def load_environment_config(environment):
    """
    Load environment-specific configuration from the appropriate .env file.

    Args:
        environment (str): 'development', 'production' or 'test'

    Returns:
        callable: decouple config function bound to the environment file, or
                  the default decouple config reading os.environ / ``.env``
    """
    env_file_name = ENV_FILES.get(environment, ".env")
    env_file_path = REPOSITORY_ROOT / env_file_name

    if env_file_path.exists():
        logger.info(
            "Loading environment configuration file",
            extra={
                "environment": environment,
                "env_file": env_file_name,
                "action": "environment_config_loaded",
                "component": "settings",
            },
        )
        return Config(RepositoryEnv(str(env_file_path)))

    logger.warning(
        "Environment file not found, using process environment",
        extra={
            "environment": environment,
            "env_file": env_file_name,
            "action": "environment_config_fallback",
            "component": "settings",
        },
    )
    return default_config


def csv_list(value):
    """Split a comma separated setting into a clean list."""
    return [item.strip() for item in str(value).split(",") if item.strip()]
