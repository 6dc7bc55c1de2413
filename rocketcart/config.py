# config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Catalog / inventory service
CATALOG_SERVICE_URL = os.getenv("CATALOG_SERVICE_URL", "http://localhost:3333")
CATALOG_TIMEOUT = float(os.getenv("CATALOG_TIMEOUT", "5.0"))

# Cart persistence: memory | sql | redis
CART_STORAGE_BACKEND = os.getenv("CART_STORAGE_BACKEND", "memory")
CART_STORAGE_KEY = os.getenv("CART_STORAGE_KEY", "rocketshoes:cart")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./rocketcart.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Notifications: log | redis
NOTIFIER_BACKEND = os.getenv("NOTIFIER_BACKEND", "log")
NOTIFICATIONS_CHANNEL = os.getenv("NOTIFICATIONS_CHANNEL", "notifications:cart")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "[%(asctime)s: %(levelname)s/%(name)s] %(message)s"
