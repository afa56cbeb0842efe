import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"
AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "0") == "1"
SEED_PLANS = os.getenv("SEED_PLANS", "1") == "1"

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# ✅ Admin back-office
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

# ✅ Credits
FREE_PLAN_NAME = os.getenv("FREE_PLAN_NAME", "free")
DEFAULT_MONTHLY_CREDIT_LIMIT = int(os.getenv("DEFAULT_MONTHLY_CREDIT_LIMIT", "5"))

# ✅ Frontend / CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")
