import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# Load params from .env file
load_dotenv()

DEFAULT_CONFIG_FILE = ".github/approve_config.yml"
DEFAULT_STATUS_CONTEXT = "PR Gatekeeper Status"
DEFAULT_DESCRIPTION_LIMIT = 140
DEFAULT_TEAM_FETCH_WORKERS = 4
DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_API_URL = "https://api.github.com"

# Events that carry a pull request and can change its review state
SUPPORTED_EVENTS = ("pull_request", "pull_request_review")


def _first(env: Mapping[str, str], *names: str, default: str = "") -> str:
    for name in names:
        raw = str(env.get(name) or "").strip()
        if raw:
            return raw
    return default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = str(env.get(name) or "").strip()
    try:
        value = int(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    config_file: str = DEFAULT_CONFIG_FILE
    token: str = ""
    app_id: str = ""
    app_private_key: str = ""
    installation_id: str = ""
    event_name: str = ""
    event_path: str = ""
    repository: str = ""
    server_url: str = DEFAULT_SERVER_URL
    api_url: str = DEFAULT_API_URL
    run_id: str = ""
    status_context: str = DEFAULT_STATUS_CONTEXT
    description_limit: int = DEFAULT_DESCRIPTION_LIMIT
    team_fetch_workers: int = DEFAULT_TEAM_FETCH_WORKERS

    @property
    def workflow_url(self) -> Optional[str]:
        if not self.repository or not self.run_id:
            return None
        return f"{self.server_url.rstrip('/')}/{self.repository}/actions/runs/{self.run_id}"

    @property
    def has_app_auth(self) -> bool:
        return bool(self.app_id and self.app_private_key and self.installation_id)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    GitHub Actions exposes action inputs as INPUT_<NAME>; those are read as
    fallbacks after the REVIEWGATE_* variables.
    """
    env = os.environ if environ is None else environ
    return Settings(
        config_file=_first(env, "REVIEWGATE_CONFIG_FILE", "INPUT_CONFIG-FILE", default=DEFAULT_CONFIG_FILE),
        token=_first(env, "REVIEWGATE_TOKEN", "INPUT_TOKEN", "GITHUB_TOKEN"),
        app_id=_first(env, "GITHUB_APP_ID"),
        app_private_key=_first(env, "GITHUB_APP_PRIVATE_KEY"),
        installation_id=_first(env, "GITHUB_INSTALLATION_ID"),
        event_name=_first(env, "GITHUB_EVENT_NAME"),
        event_path=_first(env, "GITHUB_EVENT_PATH"),
        repository=_first(env, "GITHUB_REPOSITORY"),
        server_url=_first(env, "GITHUB_SERVER_URL", default=DEFAULT_SERVER_URL),
        api_url=_first(env, "GITHUB_API_URL", default=DEFAULT_API_URL),
        run_id=_first(env, "GITHUB_RUN_ID"),
        status_context=_first(env, "REVIEWGATE_STATUS_CONTEXT", default=DEFAULT_STATUS_CONTEXT),
        description_limit=_env_int(env, "REVIEWGATE_DESCRIPTION_LIMIT", DEFAULT_DESCRIPTION_LIMIT),
        team_fetch_workers=_env_int(env, "REVIEWGATE_TEAM_FETCH_WORKERS", DEFAULT_TEAM_FETCH_WORKERS),
    )
