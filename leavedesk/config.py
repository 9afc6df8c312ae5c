from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_TITLE: str = "LeaveDesk"
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "leave_system"
    STORE_BACKEND: str = "mongo" # or memory
    PRODUCTION_MODE: bool = False
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:5173"]
    DEFAULT_ANNUAL_BALANCE: int = 20
    DEFAULT_SICK_BALANCE: int = 10
    DEFAULT_PERSONAL_BALANCE: int = 5
    TRANSITION_MAX_ATTEMPTS: int = 5
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    class Config:
        env_file = ".env"

    def default_balances(self) -> dict:
        return {
            "annual": self.DEFAULT_ANNUAL_BALANCE,
            "sick": self.DEFAULT_SICK_BALANCE,
            "personal": self.DEFAULT_PERSONAL_BALANCE,
        }


settings = Settings()
