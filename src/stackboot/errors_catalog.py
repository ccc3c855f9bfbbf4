"""Actionable error catalog for stackboot."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "env_file_missing": {
        "what": "{path} file not found.",
        "next": "Create {path} from your template and fill in the database credentials.",
    },
    "docker_unreachable": {
        "what": "Docker is not running.",
        "next": "Start Docker Desktop (or the Docker daemon) and try again.",
    },
    "compose_missing": {
        "what": "Docker Compose is not available.",
        "next": "Install Docker Compose v2 (`docker compose`) or v1 (`docker-compose`).",
    },
    "migration_failed": {
        "what": "Migration failed.",
        "next": "Check your migration setup and database connection, then retry.",
    },
    "stack_launch_failed": {
        "what": "Failed to start the Docker Compose environment from {compose_file}.",
        "next": "Inspect the compose output above or run `docker compose -f {compose_file} logs`.",
    },
    "database_not_ready": {
        "what": "Database check failed on service '{service}'.",
        "next": "Startup continues; verify the database proxy if later steps fail.",
    },
    "app_not_ready": {
        "what": "Application at {url} did not respond after {attempts} attempt(s).",
        "next": "Startup continues; check `docker logs {container}` if migrations fail.",
    },
    "config_not_found": {
        "what": "Config file not found: {path}",
        "next": "Pass an existing file with `--config` or create `.stackboot.yml`.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
