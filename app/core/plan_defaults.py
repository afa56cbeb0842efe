"""
Default subscription plan catalog.

Seed data for the subscription_plans table. The database is the source of
truth at runtime; these values are only inserted when a plan is missing.
"""
from typing import Dict, List, Any, Optional

from app.core.config import DEFAULT_MONTHLY_CREDIT_LIMIT

SUPPORTED_LANGUAGES: List[str] = ["tr", "en"]

DEFAULT_PLANS: List[Dict[str, Any]] = [
    {
        "name": "free",
        "display_name_tr": "Ücretsiz Plan",
        "display_name_en": "Free Plan",
        "description_tr": "AnimatePDF'i denemek için",
        "description_en": "Try AnimatePDF for free",
        "monthly_price_usd": 0,
        "annual_price_usd": 0,
        "monthly_credit_limit": 5,
        "features": [
            {"tr": "Ayda 5 kredi (PDF veya animasyon)", "en": "5 credits per month (PDF or animation)"},
            {"tr": "Standart görsel kalitesi", "en": "Standard image quality"},
            {"tr": "Animasyonlarda filigran", "en": "Watermarked animations"},
        ],
        "is_active": True,
        "sort_order": 0,
    },
    {
        "name": "starter",
        "display_name_tr": "Başlangıç Planı",
        "display_name_en": "Starter Plan",
        "description_tr": "Düzenli kullanım için",
        "description_en": "For regular use",
        "monthly_price_usd": 14,
        "annual_price_usd": 140,
        "monthly_credit_limit": 30,
        "features": [
            {"tr": "Ayda 30 kredi", "en": "30 credits per month"},
            {"tr": "Yüksek kaliteli görseller", "en": "High quality images"},
            {"tr": "Filigransız animasyonlar", "en": "No watermark"},
            {"tr": "Standart e-posta desteği", "en": "Standard e-mail support"},
        ],
        "is_active": True,
        "sort_order": 1,
    },
    {
        "name": "pro",
        "display_name_tr": "Profesyonel Plan",
        "display_name_en": "Pro Plan",
        "description_tr": "Yoğun kullanım ve ekipler için",
        "description_en": "For heavy use and teams",
        "monthly_price_usd": 32,
        "annual_price_usd": 320,
        "monthly_credit_limit": 100,
        "features": [
            {"tr": "Ayda 100 kredi", "en": "100 credits per month"},
            {"tr": "En yüksek kalitede görseller", "en": "Highest quality images"},
            {"tr": "Tüm özelliklere tam erişim", "en": "Full access to all features"},
            {"tr": "Öncelikli e-posta desteği", "en": "Priority e-mail support"},
        ],
        "is_active": True,
        "sort_order": 2,
    },
]


def resolve_credit_limit(monthly_credit_limit: Optional[int]) -> int:
    """
    Effective monthly credit limit for a plan.

    Zero, negative or missing limits fall back to DEFAULT_MONTHLY_CREDIT_LIMIT.
    """
    if isinstance(monthly_credit_limit, int) and monthly_credit_limit > 0:
        return monthly_credit_limit
    return DEFAULT_MONTHLY_CREDIT_LIMIT


def normalize_language(lang: Optional[str]) -> str:
    value = str(lang or "").strip().lower()[:2]
    return value if value in SUPPORTED_LANGUAGES else "en"
