"""
Currency API client for fetching exchange rates.
Rates are fetched with USD as the base and stored as USD -> code pairs.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

EXCHANGERATE_API_BASE = "https://v6.exchangerate-api.com/v6"
OPEN_ER_API_BASE = "https://open.er-api.com/v6"
BASE_CURRENCY = "USD"


def fetch_usd_rates_exchangerate_api(api_key: str, timeout: int = 10) -> Optional[Dict[str, Decimal]]:
    """
    Fetch all USD-based rates from ExchangeRate-API (exchangerate-api.com).

    Returns:
        Mapping of currency code to rate, or None if the request failed
    """
    if not api_key:
        return None
    try:
        response = requests.get(f"{EXCHANGERATE_API_BASE}/{api_key}/latest/{BASE_CURRENCY}", timeout=timeout)
        response.raise_for_status()
        data = response.json()
        rates = data.get('conversion_rates')
        if data.get('result') == 'success' and rates:
            return {code: Decimal(str(value)) for code, value in rates.items()}
        logger.warning(f"ExchangeRate-API returned no rates: {data.get('error-type')}")
    except requests.exceptions.RequestException as e:
        logger.error(f"ExchangeRate-API error: {e}")
    except ValueError as e:
        logger.error(f"ExchangeRate-API returned invalid JSON: {e}")
    return None


def fetch_usd_rates_open_api(timeout: int = 10) -> Optional[Dict[str, Decimal]]:
    """Fetch USD-based rates from the keyless open.er-api.com endpoint."""
    try:
        response = requests.get(f"{OPEN_ER_API_BASE}/latest/{BASE_CURRENCY}", timeout=timeout)
        response.raise_for_status()
        data = response.json()
        rates = data.get('rates')
        if data.get('result') == 'success' and rates:
            return {code: Decimal(str(value)) for code, value in rates.items()}
        logger.warning("open.er-api.com returned no rates")
    except requests.exceptions.RequestException as e:
        logger.error(f"open.er-api.com error: {e}")
    except ValueError as e:
        logger.error(f"open.er-api.com returned invalid JSON: {e}")
    return None


def fetch_usd_rates(
    currencies: Iterable[str],
    api_key: Optional[str] = None,
    timeout: int = 10
) -> Tuple[Dict[str, Decimal], Optional[str], Optional[str]]:
    """
    Fetch USD -> code rates for the requested currencies.
    Tries the keyed provider first when a key is configured.

    Returns:
        Tuple of (rates for the requested codes, provider name or None, error message or None)
    """
    wanted = {code.upper() for code in currencies if code}

    providers = []
    if api_key:
        providers.append(('exchangerate-api', lambda: fetch_usd_rates_exchangerate_api(api_key, timeout)))
    providers.append(('open-er-api', lambda: fetch_usd_rates_open_api(timeout)))

    for provider_name, fetch in providers:
        all_rates = fetch()
        if not all_rates:
            continue
        rates = {code: rate for code, rate in all_rates.items() if code in wanted and rate > 0}
        logger.info(f"Fetched {len(rates)}/{len(wanted)} USD rates from {provider_name}")
        return rates, provider_name, None

    error_msg = f"All API providers failed to fetch USD rates for {', '.join(sorted(wanted))}"
    logger.error(error_msg)
    return {}, None, error_msg
