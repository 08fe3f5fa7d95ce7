"""
Settings Service
Per-project storefront settings: appearance image rows and payment method.
"""
import logging
from typing import Dict, List

from flask import current_app

from dashboard.constants import get_project_keys, is_valid_payment_method, is_valid_project
from dashboard.exceptions import ValidationException
from dashboard.extensions import db
from dashboard.models.appearance import Appearance
from dashboard.models.payment_settings import PaymentSettings

logger = logging.getLogger(__name__)

ROWS = ('row1', 'row2')


def validate_project(project: str, message: str = 'Invalid project name') -> str:
    if not project or not is_valid_project(project):
        raise ValidationException(message)
    return project


def validate_works_images(works_images) -> Dict[str, List[str]]:
    """Both rows must be arrays of URL strings."""
    if not isinstance(works_images, dict):
        raise ValidationException('Invalid worksImages format')
    rows = {}
    for row in ROWS:
        urls = works_images.get(row)
        if not isinstance(urls, list) or not all(isinstance(url, str) for url in urls):
            raise ValidationException('Invalid worksImages format')
        rows[row] = [url.strip() for url in urls if url.strip()]
    return rows


class AppearanceService:

    @staticmethod
    def get_works_images(project: str) -> Dict[str, List[str]]:
        """Stored rows for a project; empty rows when nothing was saved yet."""
        validate_project(project)
        appearance = Appearance.query.filter_by(project=project).first()
        if not appearance:
            return {'row1': [], 'row2': []}
        return appearance.works_images()

    @staticmethod
    def save_works_images(project: str, works_images) -> Appearance:
        """Upsert both rows for a project. Saving the same rows twice is a no-op."""
        validate_project(project)
        rows = validate_works_images(works_images)

        appearance = Appearance.query.filter_by(project=project).first()
        if not appearance:
            appearance = Appearance(project=project)
            db.session.add(appearance)

        # New list objects so the JSON columns register the change
        appearance.row1 = list(rows['row1'])
        appearance.row2 = list(rows['row2'])
        db.session.commit()
        logger.info(f"Appearance saved for {project}: {len(rows['row1'])} row1, {len(rows['row2'])} row2")
        return appearance

    @staticmethod
    def remove_image(project: str, row: str, index: int) -> Appearance:
        rows = AppearanceService.get_works_images(project)
        if row not in ROWS or not 0 <= index < len(rows[row]):
            raise ValidationException('Invalid image position')
        rows[row].pop(index)
        return AppearanceService.save_works_images(project, rows)

    @staticmethod
    def move_image(project: str, row: str, index: int) -> Appearance:
        """Move an image to the end of the other row."""
        rows = AppearanceService.get_works_images(project)
        if row not in ROWS or not 0 <= index < len(rows[row]):
            raise ValidationException('Invalid image position')
        target = 'row2' if row == 'row1' else 'row1'
        rows[target].append(rows[row].pop(index))
        return AppearanceService.save_works_images(project, rows)

    @staticmethod
    def add_image(project: str, row: str, url: str) -> Appearance:
        rows = AppearanceService.get_works_images(project)
        if row not in ROWS:
            raise ValidationException('Invalid row')
        rows[row].append(url)
        return AppearanceService.save_works_images(project, rows)


class PaymentSettingsService:

    @staticmethod
    def get_or_create(project: str) -> PaymentSettings:
        validate_project(project)
        settings = PaymentSettings.query.filter_by(project=project).first()
        if not settings:
            settings = PaymentSettings(
                project=project,
                payment_method=current_app.config.get('DEFAULT_PAYMENT_METHOD', 'paymob')
            )
            db.session.add(settings)
            db.session.commit()
            logger.info(f"Created default payment settings for {project}: {settings.payment_method}")
        return settings

    @staticmethod
    def get_all() -> List[PaymentSettings]:
        return [PaymentSettingsService.get_or_create(project) for project in get_project_keys()]

    @staticmethod
    def update(project, payment_method) -> PaymentSettings:
        validate_project(project, 'Invalid or missing project name')
        if not payment_method or not is_valid_payment_method(payment_method):
            raise ValidationException('Invalid payment method')

        settings = PaymentSettings.query.filter_by(project=project).first()
        if not settings:
            settings = PaymentSettings(project=project)
            db.session.add(settings)
        settings.payment_method = payment_method
        db.session.commit()
        return settings
