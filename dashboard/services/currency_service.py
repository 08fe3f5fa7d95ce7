"""
Currency Service
Exchange rate lookup and multi-currency conversion used by auto-pricing.
"""
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional

from flask import current_app

from dashboard.exceptions import CurrencyRateException, ValidationException
from dashboard.extensions import db
from dashboard.models.currency_rate import CurrencyRate
from dashboard.utils.currency_api import BASE_CURRENCY, fetch_usd_rates
from dashboard.utils.currency_rates import get_fallback_rate

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def get_rate(from_currency: str, to_currency: str) -> Optional[Decimal]:
    """
    Get the conversion rate between two currencies.

    Lookup order: same currency, stored direct or reverse rate, stored rates
    crossed through USD, then the built-in approximate table.
    """
    from_currency = (from_currency or '').upper()
    to_currency = (to_currency or '').upper()
    if not from_currency or not to_currency:
        return None
    if from_currency == to_currency:
        return Decimal('1')

    rate = CurrencyRate.find_rate(from_currency, to_currency)
    if rate is not None:
        return rate

    if BASE_CURRENCY not in (from_currency, to_currency):
        to_usd = CurrencyRate.find_rate(from_currency, BASE_CURRENCY)
        from_usd = CurrencyRate.find_rate(BASE_CURRENCY, to_currency)
        if to_usd is not None and from_usd is not None:
            return to_usd * from_usd

    return get_fallback_rate(from_currency, to_currency)


def convert_amount(amount, from_currency: str, to_currency: str) -> Optional[Decimal]:
    """Convert an amount, rounded to 2 decimals. None when no rate is known."""
    rate = get_rate(from_currency, to_currency)
    if rate is None:
        return None
    return (Decimal(str(amount)) * rate).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def convert_to_multiple_currencies(amount, base_currency: str, target_currencies: Iterable[str]) -> Dict[str, Decimal]:
    """
    Convert one amount into several currencies.

    Returns:
        Mapping of currency code to converted amount; currencies without a known
        rate are left out
    """
    converted = {}
    for code in target_currencies:
        value = convert_amount(amount, base_currency, code)
        if value is None:
            logger.warning(f"No exchange rate for {base_currency} -> {code}")
            continue
        converted[code] = value
    return converted


def list_rates() -> List[CurrencyRate]:
    return CurrencyRate.query.order_by(CurrencyRate.from_currency, CurrencyRate.to_currency).all()


def upsert_rate(from_currency, to_currency, rate, notes=None, provider=None) -> CurrencyRate:
    """Create or update the stored rate for a currency pair."""
    from_currency = str(from_currency or '').strip().upper()
    to_currency = str(to_currency or '').strip().upper()
    if len(from_currency) != 3 or len(to_currency) != 3:
        raise ValidationException("from and to must be 3-letter currency codes")
    if from_currency == to_currency:
        raise ValidationException("from and to must be different currencies")
    try:
        rate = Decimal(str(rate))
    except (InvalidOperation, ValueError):
        raise ValidationException("rate must be a number")
    if not rate.is_finite() or rate <= 0:
        raise ValidationException("rate must be greater than 0")

    record = CurrencyRate.query.filter_by(from_currency=from_currency, to_currency=to_currency).first()
    if not record:
        record = CurrencyRate(from_currency=from_currency, to_currency=to_currency)
        db.session.add(record)

    record.rate = rate
    record.is_active = True
    if notes is not None:
        record.notes = notes
    record.api_provider = provider
    record.last_api_sync = datetime.utcnow() if provider else None

    db.session.commit()
    return record


def sync_rates(currencies: Iterable[str]) -> Dict[str, float]:
    """
    Refresh stored USD -> code rates from the exchange rate API.

    Returns:
        Mapping of currency code to the stored rate
    """
    wanted = sorted({code.upper() for code in currencies if code and code.upper() != BASE_CURRENCY})
    if not wanted:
        return {}

    rates, provider, error = fetch_usd_rates(
        wanted,
        api_key=current_app.config.get('EXCHANGERATE_API_KEY'),
        timeout=current_app.config.get('CURRENCY_API_TIMEOUT', 10)
    )
    if error:
        raise CurrencyRateException(error)

    stored = {}
    for code, rate in rates.items():
        upsert_rate(BASE_CURRENCY, code, rate, provider=provider)
        stored[code] = float(rate)

    missing = [code for code in wanted if code not in rates]
    if missing:
        logger.warning(f"Rate provider {provider} has no rate for: {', '.join(missing)}")
    return stored
