"""Runtime configuration for the typewriter runtime."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="TYPEWRITER_", env_file=".env", extra="ignore")

    app_name: str = "typewriter-runtime"
    log_level: str = "INFO"
    environment: str = Field(
        default="development",
        description="Execution mode. Schema violations fail hard when this is 'test'.",
    )
    strict_mode: bool | None = Field(
        default=None,
        description="Explicit violation policy; overrides the environment-derived default.",
    )
    validate_payloads: bool = Field(
        default=True,
        description="Embed the JSON Schema validator in newly built clients.",
    )
    write_key: str | None = None
    plan_path: str | None = Field(
        default=None,
        description="Tracking plan JSON used by the CLI when --plan is not given.",
    )

    def resolved_strict_mode(self) -> bool:
        if self.strict_mode is not None:
            return self.strict_mode
        return self.environment.lower() == "test"


settings = Settings()
