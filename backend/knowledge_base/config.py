import os
from dotenv import load_dotenv

load_dotenv()


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEFAULT_PAGE_TITLE = "Untitled"
    DEFAULT_PAGE_ICON = "📄"

    # Global search (command palette)
    SEARCH_RESULT_LIMIT = int(os.getenv("SEARCH_RESULT_LIMIT", 20))
    SEARCH_SNIPPET_LENGTH = int(os.getenv("SEARCH_SNIPPET_LENGTH", 200))

    # Version history listing
    VERSION_LIST_LIMIT = int(os.getenv("VERSION_LIST_LIMIT", 50))
    VERSION_LIST_MAX = int(os.getenv("VERSION_LIST_MAX", 200))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DEV_DATABASE_URI", "sqlite:///knowledge_base.db"
    )


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
