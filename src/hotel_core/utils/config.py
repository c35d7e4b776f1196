import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_TABLE_NAME = "hotel-booking"
DEFAULT_REGION = "ap-south-1"


@dataclass(frozen=True)
class Settings:
    table_name: str
    aws_region: str
    app_env: str
    log_level: str
    jwt_secret: Optional[str]
    jwt_algorithm: str

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"


def get_settings() -> Settings:
    return Settings(
        table_name=os.environ.get("TABLE_NAME", DEFAULT_TABLE_NAME),
        aws_region=os.environ.get("AWS_REGION", DEFAULT_REGION),
        app_env=os.environ.get("APP_ENV", "production").lower(),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        jwt_secret=os.environ.get("JWT_SECRET"),
        jwt_algorithm=os.environ.get("JWT_ALGORITHM", "HS256"),
    )
