from pydantic import BaseModel
import os

class Settings(BaseModel):
    base_url: str = os.getenv("EMBEDDING_API_BASE_URL", "http://localhost:8000")
    api_token: str = os.getenv("EMBEDDING_API_TOKEN", "")
    log_level: str = os.getenv("EMBEDDING_LOG_LEVEL", "INFO")

    def normalized_base_url(self) -> str: return self.base_url.rstrip("/")

settings = Settings()
