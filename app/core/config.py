from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Remote invocation endpoint shared by the SQL executor and the orchestrator
    BRIDGE_URL: str
    EXECUTOR_FUNCTION_NAME: str = "troy-sql-executor"
    ORCHESTRATOR_FUNCTION_NAME: str = "troy-orchestrator-6am"
    LOG_LEVEL: str = "INFO"

    # This tells Pydantic to read from the .env file
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create a single instance of the settings to use everywhere
settings = Settings()
