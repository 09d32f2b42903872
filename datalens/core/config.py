from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Uploads
    upload_max_file_size_mb: int = 10
    supported_extensions: str = ".csv,.xlsx,.xls,.txt"

    # Analysis limits
    analysis_max_rows: int = 1000  # Rows handed to the prompt builder
    prompt_excerpt_rows: int = 5  # Rows embedded verbatim in the prompt
    analysis_domain: str = "a digital marketing agency"
    strict_chart_validation: bool = Field(
        default=False, validation_alias="DATALENS_STRICT_CHART_VALIDATION"
    )

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash-latest"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"

    # LLM call timeouts and retries (in seconds)
    llm_api_timeout: int = 60
    llm_max_attempts: int = 3  # Includes the first attempt
    llm_retry_base_delay: float = 1.0
    llm_retry_multiplier: float = 2.0

    model_config = ConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    @property
    def upload_max_bytes(self) -> int:
        return self.upload_max_file_size_mb * 1024 * 1024

    @property
    def extension_list(self) -> list[str]:
        return [ext.strip().lower() for ext in self.supported_extensions.split(",") if ext.strip()]

    @property
    def origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
