from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    environment: str = "development"
    debug: bool = False
    allowed_origins: str = "http://localhost:3000"
    log_level: str = "INFO"

    # Auth / JWT
    secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Remote GraphQL API
    graphql_endpoint: str = "http://localhost:4000/graphql"
    graphql_api_token: str = ""
    graphql_timeout_seconds: float = 15.0

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    cache_enabled: bool = True
    plan_cache_ttl_seconds: int = 300

    # Wizard
    provision_organization: bool = True
    wizard_session_ttl_seconds: int = 3600
    default_phone_country_code: str = "+233"
    default_country: str = "Ghana"
    organisation_currency: str = "GHS"
    organisation_timezone: str = "Africa/Accra"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
