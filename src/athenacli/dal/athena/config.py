from dataclasses import dataclass
from typing import Optional

from athenacli.common.config.env import get_env_float, get_env_str
from athenacli.dal.errors import ConfigurationError


@dataclass(frozen=True)
class AthenaConfig:
    """Connection settings for an Athena orchestrator, immutable for its lifetime."""

    region: str
    database: str
    output_location: str
    workgroup: Optional[str] = None
    query_timeout_seconds: Optional[float] = None
    https_proxy: Optional[str] = None

    def __post_init__(self) -> None:
        missing = [
            name
            for name, value in {
                "region": self.region,
                "database": self.database,
                "output_location": self.output_location,
            }.items()
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Athena config missing required values: {', '.join(missing)}.")
        if self.query_timeout_seconds is not None and self.query_timeout_seconds <= 0:
            raise ConfigurationError("query_timeout_seconds must be positive when set.")

    @classmethod
    def from_env(cls, **overrides) -> "AthenaConfig":
        """Load Athena config from environment variables.

        Keyword overrides whose value is not ``None`` take precedence over the
        environment, which lets the CLI layer flags on top of it.
        """
        try:
            timeout_seconds = get_env_float("ATHENA_QUERY_TIMEOUT_SECONDS")
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        values = {
            "region": get_env_str("AWS_REGION"),
            "database": get_env_str("ATHENA_DATABASE"),
            "output_location": get_env_str("ATHENA_OUTPUT_LOCATION"),
            "workgroup": get_env_str("ATHENA_WORKGROUP") or None,
            "query_timeout_seconds": timeout_seconds,
            "https_proxy": get_env_str("HTTPS_PROXY") or get_env_str("https_proxy"),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        env_names = {
            "region": "AWS_REGION",
            "database": "ATHENA_DATABASE",
            "output_location": "ATHENA_OUTPUT_LOCATION",
        }
        missing = [env for key, env in env_names.items() if not values.get(key)]
        if missing:
            missing_list = ", ".join(missing)
            raise ConfigurationError(
                f"Athena query target missing required config: {missing_list}. "
                "Set AWS_REGION, ATHENA_DATABASE and ATHENA_OUTPUT_LOCATION."
            )

        return cls(**values)
