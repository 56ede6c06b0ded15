import os
from datetime import timedelta

from dotenv import load_dotenv

# Load .env from project root so local development DATABASE_URL is picked up
load_dotenv()


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Auth: signed JWT carried in a cookie (or an Authorization header for API clients)
    JWT_SECRET_KEY = os.environ.get("AUTH_SECRET", "change-this-auth-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_EXPIRES_HOURS", "12")))
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_ACCESS_COOKIE_NAME = "taskhub_session"
    JWT_COOKIE_SECURE = os.environ.get("JWT_COOKIE_SECURE", "0") == "1"
    JWT_COOKIE_CSRF_PROTECT = os.environ.get("JWT_COOKIE_CSRF_PROTECT", "0") == "1"
    JWT_COOKIE_SAMESITE = "Lax"

    # Public URL of the app; used as the allowed CORS origin when set
    AUTH_URL = os.environ.get("AUTH_URL")

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///taskhub.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Project used for time entries logged against tasks with no project
    DEFAULT_PROJECT_NAME = os.environ.get("DEFAULT_PROJECT_NAME", "默认项目")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    DEBUG = os.environ.get("FLASK_DEBUG", "0") == "1"
    JSON_SORT_KEYS = False
