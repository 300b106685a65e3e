import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    SECRET_KEY: str = os.getenv("JWT_SECRET", os.getenv("SECRET_KEY", "dev-secret-change-me"))
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    # 0 - токены без срока действия
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "0"))
    DB_PATH: str = os.getenv("DB_PATH", "./app.db")

    INITIAL_CREDITS: int = int(os.getenv("INITIAL_CREDITS", "0"))

    CLIPDROP_API_KEY: str = os.getenv("CLIPDROP_API_KEY", "")
    CLIPDROP_API_URL: str = os.getenv("CLIPDROP_API_URL", "https://clipdrop-api.co/text-to-image/v1")
    IMAGE_TIMEOUT_SECONDS: float = float(os.getenv("IMAGE_TIMEOUT_SECONDS", "60"))

    RAZORPAY_KEY_ID: str = os.getenv("RAZORPAY_KEY_ID", "")
    RAZORPAY_KEY_SECRET: str = os.getenv("RAZORPAY_KEY_SECRET", "")
    RAZORPAY_API_URL: str = os.getenv("RAZORPAY_API_URL", "https://api.razorpay.com/v1")
    # razorpay | stub (заглушка только для локальной разработки)
    PAYMENT_PROVIDER: str = os.getenv("PAYMENT_PROVIDER", "razorpay")
    PAYMENT_STUB_AUTO_CAPTURE: bool = os.getenv("PAYMENT_STUB_AUTO_CAPTURE", "false").lower() == "true"
    PAYMENT_TIMEOUT_SECONDS: float = float(os.getenv("PAYMENT_TIMEOUT_SECONDS", "30"))
    CURRENCY: str = os.getenv("CURRENCY", "INR")

    CORS_ORIGINS: List[str] = field(default_factory=lambda: _split_origins(os.getenv(
        "CORS_ORIGINS",
        "https://genpix-frontend.vercel.app,http://localhost:3000,http://localhost:5173",
    )))
    PORT: int = int(os.getenv("PORT", "4000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
