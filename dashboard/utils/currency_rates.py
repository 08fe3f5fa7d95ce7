"""
Fallback currency conversion rates.
Rates represent: 1 USD = X units of target currency.
These are approximate and only used when no rate is stored in the database.
Converting between two non-USD currencies goes through USD:
    rate(A -> B) = USD_RATES[B] / USD_RATES[A]
"""

from decimal import Decimal
from typing import Optional

USD_RATES = {
    "USD": 1.0,

    # Gulf currencies
    "SAR": 3.75,     # Saudi Riyal
    "AED": 3.6725,   # UAE Dirham
    "QAR": 3.64,     # Qatari Riyal
    "KWD": 0.307,    # Kuwaiti Dinar
    "BHD": 0.376,    # Bahraini Dinar
    "OMR": 0.385,    # Omani Rial

    # Other Arab currencies
    "EGP": 48.5,     # Egyptian Pound
    "JOD": 0.709,    # Jordanian Dinar
    "LBP": 89500.0,  # Lebanese Pound
    "IQD": 1310.0,   # Iraqi Dinar
    "SYP": 13000.0,  # Syrian Pound
    "YER": 250.0,    # Yemeni Rial
    "SDG": 600.0,    # Sudanese Pound
    "LYD": 4.85,     # Libyan Dinar
    "TND": 3.1,      # Tunisian Dinar
    "DZD": 134.0,    # Algerian Dinar
    "MAD": 9.9,      # Moroccan Dirham
    "MRU": 39.8,     # Mauritanian Ouguiya

    # Major world currencies
    "EUR": 0.92,     # Euro
    "GBP": 0.79,     # British Pound
    "CHF": 0.88,     # Swiss Franc
    "CAD": 1.37,     # Canadian Dollar
    "AUD": 1.52,     # Australian Dollar
    "JPY": 150.0,    # Japanese Yen
    "CNY": 7.2,      # Chinese Yuan
    "TRY": 34.0,     # Turkish Lira

    # Muslim-majority countries with large donor communities
    "PKR": 278.0,    # Pakistani Rupee
    "INR": 83.5,     # Indian Rupee
    "BDT": 118.0,    # Bangladeshi Taka
    "IDR": 15700.0,  # Indonesian Rupiah
    "MYR": 4.5,      # Malaysian Ringgit
    "NGN": 1550.0,   # Nigerian Naira
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "SAR": "ر.س",
    "AED": "د.إ",
    "QAR": "ر.ق",
    "KWD": "د.ك",
    "BHD": ".د.ب",
    "OMR": "ر.ع.",
    "EGP": "ج.م",
    "JOD": "د.ا",
    "LBP": "ل.ل",
    "IQD": "ع.د",
    "SYP": "ل.س",
    "YER": "﷼",
    "SDG": "ج.س.",
    "LYD": "ل.د",
    "TND": "د.ت",
    "DZD": "د.ج",
    "MAD": "د.م.",
    "MRU": "UM",
    "EUR": "€",
    "GBP": "£",
    "CHF": "Fr",
    "CAD": "$",
    "AUD": "$",
    "JPY": "¥",
    "CNY": "¥",
    "TRY": "₺",
    "PKR": "₨",
    "INR": "₹",
    "BDT": "৳",
    "IDR": "Rp",
    "MYR": "RM",
    "NGN": "₦",
}


def get_fallback_rate(from_currency: str, to_currency: str) -> Optional[Decimal]:
    """Approximate rate between two currencies from the built-in USD table."""
    from_currency = (from_currency or "").upper()
    to_currency = (to_currency or "").upper()
    if from_currency == to_currency:
        return Decimal("1")

    from_rate = USD_RATES.get(from_currency)
    to_rate = USD_RATES.get(to_currency)
    if not from_rate or not to_rate:
        return None
    return Decimal(str(to_rate)) / Decimal(str(from_rate))


def get_currency_symbol(currency_code: str) -> str:
    return CURRENCY_SYMBOLS.get((currency_code or "").upper(), (currency_code or "").upper())
