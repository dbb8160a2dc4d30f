import os

db_url = os.environ.get("DB_URL", "sqlite://:memory:")
generate_schemas = os.environ.get("GENERATE_SCHEMAS", "true").lower() == "true"
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
SLOTS_CACHE_TTL = int(os.environ.get("SLOTS_CACHE_TTL", "60"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
