import os
from urllib.parse import quote_plus
from dotenv import load_dotenv

load_dotenv()


def _get_database_url():
    """
    Get the SQLAlchemy URL for the employee store.

    Priority:
      1) DATABASE_URL (full SQLAlchemy URL)
      2) DB_DRIVER/DB_HOST/DB_PORT/DB_NAME/DB_USERNAME/DB_PASSWORD (compose a URL)

    Handles Render-style postgres:// URLs, which SQLAlchemy rejects.
    """
    database_url = (os.getenv('DATABASE_URL') or '').strip()

    if not database_url:
        driver = os.getenv('DB_DRIVER', 'postgresql').strip()
        host = os.getenv('DB_HOST', 'localhost').strip()
        port = os.getenv('DB_PORT', '5432').strip()
        name = os.getenv('DB_NAME', 'employees').strip()
        user = os.getenv('DB_USERNAME', 'postgres').strip()
        password = os.getenv('DB_PASSWORD', '')

        credentials = quote_plus(user)
        if password:
            credentials = f"{credentials}:{quote_plus(password)}"
        database_url = f"{driver}://{credentials}@{host}:{port}/{name}"

    if database_url.startswith('postgres://'):
        database_url = database_url.replace('postgres://', 'postgresql://', 1)

    return database_url


def _parse_origins(raw):
    if not raw or raw.strip() == '*':
        return '*'
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


class Config:
    DATABASE_URL = _get_database_url()

    # Engine options shared by every Store built from this config
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': int(os.getenv('DB_POOL_RECYCLE', '300')),
    }

    PORT = int(os.getenv('PORT', '8000'))
    CORS_ORIGINS = _parse_origins(os.getenv('CORS_ORIGINS', '*'))
