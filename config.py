import os
from dotenv import load_dotenv
load_dotenv()

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///volunteers.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # pooled connections: drop dead ones, recycle idle ones
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "1800")),
    }
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "Volunteer Radar")
    ALERT_NOTIFY_TO = os.getenv("ALERT_NOTIFY_TO")
    ALERT_THRESHOLD = float(os.getenv("ALERT_THRESHOLD", "75"))
    RANK_TIERS = os.getenv("RANK_TIERS", "1000:diamond,500:gold,250:silver,100:bronze")
    RANK_ENTRY_TIER = os.getenv("RANK_ENTRY_TIER", "beginner")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
