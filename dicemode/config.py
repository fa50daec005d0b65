from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = "local"
    debug: bool = True
    log_level: str = "INFO"

    # Report layout. The name column is as wide as the longest instruction
    # name, but never narrower than this floor.
    name_width_floor: int = 0
    aggregate_label: str = "Σ"

    # Seed for the default random source. Leave unset for fresh rolls every run.
    rng_seed: int | None = None

    # Bind address for `dicemode serve`.
    server_host: str = "127.0.0.1"
    server_port: int = 8000


settings = Settings()
