from pydantic_settings import BaseSettings
from pydantic import ConfigDict

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env")

    ENV: str = "development"

    DATABASE_URL: str = "sqlite:///./store.db"
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # VNPay sandbox gateway
    VNPAY_TMN_CODE: str = ""
    VNPAY_HASH_SECRET: str = ""
    VNPAY_URL: str = "https://sandbox.vnpayment.vn/paymentv2/vpcpay.html"
    VNPAY_RETURN_URL: str = "http://localhost:8000/api/customer/vnpay/callback"
    FRONTEND_URL: str = "http://localhost:3000"

    PRODUCT_COUNT_CACHE_TTL_SECONDS: int = 300

    # Off: a canceled order keeps the promotion usage it consumed
    RELEASE_PROMO_ON_CANCEL: bool = False

    INVOICE_COMPANY_NAME: str = "Store Backend"


settings = Settings()
