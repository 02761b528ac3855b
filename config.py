import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field

from errors import ConfigError

DEFAULT_GITHUB_API = "https://api.github.com"


def _read(env: Mapping[str, str], name: str) -> Optional[str]:
    # GitHub Actions exposes `with:` inputs as INPUT_<NAME>
    for key in (f"INPUT_{name}", name):
        value = env.get(key)
        if value is not None and value.strip():
            return value.strip()
    return None


def _require(env: Mapping[str, str], name: str) -> str:
    value = _read(env, name)
    if value is None:
        raise ConfigError(f"{name} is missing (set the {name} action input or environment variable)")
    return value


def split_patterns(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


class ReviewConfig(BaseModel):
    github_token: str
    gemini_api_key: str
    model_name: str
    exclude_patterns: List[str] = Field(default_factory=list)
    max_concurrency: int = Field(default=4, ge=1)
    github_api_base: str = DEFAULT_GITHUB_API
    request_timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ReviewConfig":
        """
        Build the run configuration from the process environment.

        Callers are expected to have run load_dotenv() first when a .env file
        should be honoured.
        """
        env = os.environ if env is None else env
        concurrency = _read(env, "MAX_CONCURRENCY")
        try:
            max_concurrency = int(concurrency) if concurrency else 4
        except ValueError:
            raise ConfigError(f"MAX_CONCURRENCY must be an integer, got {concurrency!r}") from None
        if max_concurrency < 1:
            raise ConfigError("MAX_CONCURRENCY must be at least 1")

        return cls(
            github_token=_require(env, "GITHUB_TOKEN"),
            gemini_api_key=_require(env, "GEMINI_API_KEY"),
            model_name=_require(env, "GEMINI_MODEL"),
            exclude_patterns=split_patterns(_read(env, "EXCLUDE")),
            max_concurrency=max_concurrency,
            github_api_base=(env.get("GITHUB_API_URL") or DEFAULT_GITHUB_API).rstrip("/"),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )
