"""
Country Service
Business logic for country configuration and the active-country display order.
"""
import logging
from typing import Dict, Iterable, List

from dashboard.exceptions import NotFoundException, ValidationException
from dashboard.extensions import db
from dashboard.models.country import Country
from dashboard.utils.currency_rates import get_currency_symbol

logger = logging.getLogger(__name__)

UNORDERED = float('inf')

# Seed data: (code, name_ar, name_en, currency_code, flag_emoji)
DEFAULT_COUNTRIES = [
    ('SA', 'السعودية', 'Saudi Arabia', 'SAR', '🇸🇦'),
    ('AE', 'الإمارات', 'United Arab Emirates', 'AED', '🇦🇪'),
    ('KW', 'الكويت', 'Kuwait', 'KWD', '🇰🇼'),
    ('QA', 'قطر', 'Qatar', 'QAR', '🇶🇦'),
    ('BH', 'البحرين', 'Bahrain', 'BHD', '🇧🇭'),
    ('OM', 'عمان', 'Oman', 'OMR', '🇴🇲'),
    ('EG', 'مصر', 'Egypt', 'EGP', '🇪🇬'),
    ('JO', 'الأردن', 'Jordan', 'JOD', '🇯🇴'),
    ('IQ', 'العراق', 'Iraq', 'IQD', '🇮🇶'),
    ('LB', 'لبنان', 'Lebanon', 'LBP', '🇱🇧'),
    ('MA', 'المغرب', 'Morocco', 'MAD', '🇲🇦'),
    ('DZ', 'الجزائر', 'Algeria', 'DZD', '🇩🇿'),
    ('TN', 'تونس', 'Tunisia', 'TND', '🇹🇳'),
    ('LY', 'ليبيا', 'Libya', 'LYD', '🇱🇾'),
    ('SD', 'السودان', 'Sudan', 'SDG', '🇸🇩'),
    ('YE', 'اليمن', 'Yemen', 'YER', '🇾🇪'),
    ('TR', 'تركيا', 'Turkey', 'TRY', '🇹🇷'),
    ('GB', 'المملكة المتحدة', 'United Kingdom', 'GBP', '🇬🇧'),
    ('US', 'الولايات المتحدة', 'United States', 'USD', '🇺🇸'),
    ('DE', 'ألمانيا', 'Germany', 'EUR', '🇩🇪'),
    ('FR', 'فرنسا', 'France', 'EUR', '🇫🇷'),
    ('CA', 'كندا', 'Canada', 'CAD', '🇨🇦'),
    ('AU', 'أستراليا', 'Australia', 'AUD', '🇦🇺'),
    ('MY', 'ماليزيا', 'Malaysia', 'MYR', '🇲🇾'),
    ('ID', 'إندونيسيا', 'Indonesia', 'IDR', '🇮🇩'),
    ('PK', 'باكستان', 'Pakistan', 'PKR', '🇵🇰'),
]

# Active out of the box, in this order
DEFAULT_ACTIVE_CODES = ['SA', 'AE', 'KW', 'QA', 'BH', 'OM', 'EG']


def display_sort_key(country: Country, locale: str = 'ar'):
    """Active first, then sort_order (NULL last), then localized name."""
    sort_order = country.sort_order if country.sort_order is not None else UNORDERED
    return (
        not country.is_active,
        sort_order,
        (country.localized_name(locale) or '').casefold(),
    )


def sort_for_display(countries: Iterable[Country], locale: str = 'ar') -> List[Country]:
    return sorted(countries, key=lambda country: display_sort_key(country, locale))


def parse_country_id(value) -> int:
    if isinstance(value, bool):
        raise ValidationException(f"Invalid country id: {value}")
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationException(f"Invalid country id: {value}")


class CountryService:
    """Service class for country CRUD and order maintenance."""

    @staticmethod
    def list_countries(active_only: bool = True, locale: str = 'ar') -> List[Country]:
        query = Country.query
        if active_only:
            query = query.filter(Country.is_active == True)  # noqa: E712
        return sort_for_display(query.all(), locale)

    @staticmethod
    def get_country(country_id) -> Country:
        try:
            country = db.session.get(Country, parse_country_id(country_id))
        except ValidationException:
            raise NotFoundException("Country not found")
        if not country:
            raise NotFoundException("Country not found")
        return country

    @staticmethod
    def active_currency_codes() -> List[str]:
        """Distinct currency codes of active countries, in display order."""
        codes = []
        for country in CountryService.list_countries(active_only=True):
            if country.currency_code and country.currency_code not in codes:
                codes.append(country.currency_code)
        return codes

    @staticmethod
    def _validated_fields(data: Dict, partial: bool) -> Dict:
        """Map request JSON onto model fields, validating what is present."""
        fields = {}

        if 'code' in data or not partial:
            code = str(data.get('code') or '').strip().upper()
            if len(code) != 2 or not code.isalpha():
                raise ValidationException("code must be a 2-letter ISO country code")
            fields['code'] = code

        if 'name' in data or not partial:
            name = data.get('name')
            if not isinstance(name, dict):
                raise ValidationException("Missing required fields: name.ar, name.en")
            for lang in ('ar', 'en'):
                if lang in name or not partial:
                    value = str(name.get(lang) or '').strip()
                    if not value:
                        raise ValidationException("Missing required fields: name.ar, name.en")
                    fields[f'name_{lang}'] = value

        if 'currencyCode' in data or not partial:
            currency_code = str(data.get('currencyCode') or '').strip().upper()
            if len(currency_code) != 3 or not currency_code.isalpha():
                raise ValidationException("currencyCode must be a 3-letter ISO currency code")
            fields['currency_code'] = currency_code

        if 'currencySymbol' in data:
            fields['currency_symbol'] = str(data.get('currencySymbol') or '').strip()
        elif not partial:
            fields['currency_symbol'] = get_currency_symbol(fields['currency_code'])

        if 'flagEmoji' in data:
            fields['flag_emoji'] = str(data.get('flagEmoji') or '').strip()

        if 'isActive' in data:
            if not isinstance(data['isActive'], bool):
                raise ValidationException("isActive must be a boolean")
            fields['is_active'] = data['isActive']

        return fields

    @staticmethod
    def create_country(data: Dict) -> Country:
        fields = CountryService._validated_fields(data, partial=False)

        if Country.query.filter_by(code=fields['code']).first():
            raise ValidationException(f"Country with code {fields['code']} already exists")

        country = Country(**fields)
        country.is_active = fields.get('is_active', False)
        country.sort_order = None
        db.session.add(country)
        db.session.flush()

        if country.is_active:
            CountryService._append_to_active_order(country)

        db.session.commit()
        logger.info(f"Country created: {country.code} (active={country.is_active})")
        return country

    @staticmethod
    def update_country(country_id, data: Dict) -> Country:
        country = CountryService.get_country(country_id)
        fields = CountryService._validated_fields(data, partial=True)

        new_code = fields.get('code')
        if new_code and new_code != country.code:
            if Country.query.filter(Country.code == new_code, Country.id != country.id).first():
                raise ValidationException(f"Country with code {new_code} already exists")

        was_active = country.is_active
        for field, value in fields.items():
            setattr(country, field, value)

        if was_active != country.is_active:
            if country.is_active:
                CountryService._append_to_active_order(country)
            else:
                country.sort_order = None
            db.session.flush()
            CountryService._apply_order(CountryService._active_ids_in_order())

        db.session.commit()
        return country

    @staticmethod
    def delete_country(country_id) -> Country:
        country = CountryService.get_country(country_id)
        db.session.delete(country)
        db.session.flush()
        CountryService._apply_order(CountryService._active_ids_in_order())
        db.session.commit()
        logger.info(f"Country deleted: {country.code}")
        return country

    @staticmethod
    def reorder_countries(ordered_ids) -> List[Country]:
        """
        Assign contiguous sort keys 0..n-1 to exactly the given countries, in the
        given order, and clear the sort key of every other country.

        Returns:
            All countries in display order
        """
        if not isinstance(ordered_ids, list):
            raise ValidationException("orderedIds array is required")

        ids = [parse_country_id(value) for value in ordered_ids]
        if len(set(ids)) != len(ids):
            raise ValidationException("orderedIds must not contain duplicates")

        if ids:
            found = {country.id: country for country in Country.query.filter(Country.id.in_(ids)).all()}
            missing = [str(country_id) for country_id in ids if country_id not in found]
            if missing:
                raise ValidationException(f"Unknown country ids: {', '.join(missing)}")
            inactive = [found[country_id].code for country_id in ids if not found[country_id].is_active]
            if inactive:
                raise ValidationException(f"Only active countries can be ordered: {', '.join(inactive)}")

        CountryService._apply_order(ids)
        db.session.commit()
        return CountryService.list_countries(active_only=False)

    @staticmethod
    def normalize_sort_order() -> List[Country]:
        """Close any gaps in the active order, keeping its relative order."""
        return CountryService.reorder_countries(CountryService._active_ids_in_order())

    @staticmethod
    def _active_ids_in_order() -> List[int]:
        return [country.id for country in CountryService.list_countries(active_only=True)]

    @staticmethod
    def _append_to_active_order(country: Country) -> None:
        others = [c for c in Country.query.filter(Country.is_active == True).all() if c.id != country.id]  # noqa: E712
        keys = [c.sort_order for c in others if c.sort_order is not None]
        country.sort_order = max(keys) + 1 if keys else 0

    @staticmethod
    def _apply_order(ids: List[int]) -> None:
        position = {country_id: index for index, country_id in enumerate(ids)}
        for country in Country.query.all():
            country.sort_order = position.get(country.id)

    @staticmethod
    def seed_default_countries() -> int:
        """Insert the default countries that do not exist yet. Returns how many were added."""
        existing = {code for (code,) in db.session.query(Country.code).all()}
        added = 0
        for code, name_ar, name_en, currency_code, flag in DEFAULT_COUNTRIES:
            if code in existing:
                continue
            db.session.add(Country(
                code=code,
                name_ar=name_ar,
                name_en=name_en,
                currency_code=currency_code,
                currency_symbol=get_currency_symbol(currency_code),
                flag_emoji=flag,
                is_active=code in DEFAULT_ACTIVE_CODES,
                sort_order=None
            ))
            added += 1
        db.session.flush()

        # New active countries keep the DEFAULT_ACTIVE_CODES order after existing ones
        ordered = CountryService._active_ids_in_order()
        by_code = {c.code: c.id for c in Country.query.filter(Country.code.in_(DEFAULT_ACTIVE_CODES)).all()}
        seeded_ids = [by_code[code] for code in DEFAULT_ACTIVE_CODES if code in by_code and code not in existing]
        ordered = [country_id for country_id in ordered if country_id not in seeded_ids] + seeded_ids
        CountryService._apply_order(ordered)

        db.session.commit()
        logger.info(f"Seeded {added} countries")
        return added
