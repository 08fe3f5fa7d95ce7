"""
Cloudinary utility functions for handling image uploads
"""
import os
import re
import uuid
from datetime import datetime
from io import BytesIO

import cloudinary
import cloudinary.uploader
from flask import current_app
from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename

from dashboard.exceptions import ImageUploadException, ValidationException

PUBLIC_ID_PATTERN = re.compile(r'/upload/(?:v\d+/)?(.+)\.\w+$')

# Applied to every uploaded image so the storefronts never serve originals
UPLOAD_TRANSFORMATION = [
    {'width': 1000, 'height': 1000, 'crop': 'limit'},
    {'quality': 'auto'},
    {'fetch_format': 'auto'},
]


def init_cloudinary(app):
    """Initialize Cloudinary with credentials from the app config"""
    cloud_name = app.config.get('CLOUDINARY_CLOUD_NAME')
    api_key = app.config.get('CLOUDINARY_API_KEY')
    api_secret = app.config.get('CLOUDINARY_API_SECRET')

    if not cloud_name or not api_key or not api_secret:
        app.logger.warning("⚠️ Cloudinary credentials not configured. Image uploads will fail.")
        app.logger.warning("Please set CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, and CLOUDINARY_API_SECRET in your .env file")
        return False

    cloudinary.config(
        cloud_name=cloud_name,
        api_key=api_key,
        api_secret=api_secret,
        secure=True
    )
    app.logger.info(f"✅ Cloudinary initialized (cloud_name: {cloud_name})")
    return True


def is_configured():
    return bool(cloudinary.config().cloud_name and cloudinary.config().api_key)


def allowed_image(filename):
    if not filename or '.' not in filename:
        return False
    ext = filename.rsplit('.', 1)[1].lower()
    return ext in current_app.config['ALLOWED_IMAGE_EXTENSIONS']


def read_image_upload(file):
    """
    Read an uploaded file and make sure it is a decodable image.

    Returns:
        The file content as bytes
    """
    if not file or not getattr(file, 'filename', None):
        raise ValidationException("No file provided")
    if not allowed_image(file.filename):
        raise ValidationException("File type not allowed")

    if hasattr(file, 'seek'):
        file.seek(0)
    content = file.read()
    if not content:
        raise ValidationException("File is empty")

    try:
        with Image.open(BytesIO(content)) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        current_app.logger.warning(f"Rejected upload {file.filename}: {e}")
        raise ValidationException("File is not a valid image")

    return content


def upload_image(file, folder='products', public_id=None):
    """
    Upload an image to Cloudinary

    Args:
        file: FileStorage object from Flask request
        folder: Cloudinary folder path
        public_id: Optional public ID for the image

    Returns:
        dict with 'url' (secure_url) and 'publicId'
    """
    content = read_image_upload(file)

    if not is_configured():
        current_app.logger.error("❌ Cloudinary configuration is missing")
        raise ImageUploadException("Cloudinary configuration is missing")

    if not public_id:
        base, _ = os.path.splitext(secure_filename(file.filename))
        public_id = f"{base or 'image'}_{uuid.uuid4().hex[:8]}_{int(datetime.utcnow().timestamp())}"

    try:
        result = cloudinary.uploader.upload(
            BytesIO(content),
            folder=folder,
            public_id=public_id,
            resource_type='image',
            transformation=UPLOAD_TRANSFORMATION,
            overwrite=False
        )
    except Exception as e:
        current_app.logger.error(f"❌ Error uploading {file.filename} to Cloudinary: {e}", exc_info=True)
        raise ImageUploadException("Failed to upload image")

    secure_url = result.get('secure_url') or result.get('url')
    if not secure_url:
        current_app.logger.error(f"❌ Upload succeeded but no URL returned from Cloudinary: {result}")
        raise ImageUploadException("Failed to upload image", cdn_response=result)

    current_app.logger.info(f"✅ Uploaded {file.filename} to Cloudinary: {secure_url}")
    return {
        'url': secure_url,
        'publicId': result.get('public_id'),
    }


def delete_image(public_id):
    """
    Delete an image from Cloudinary

    Returns:
        True when Cloudinary confirmed the deletion, False when it reported nothing to delete
    """
    if not public_id:
        raise ValidationException("Public ID is required")
    try:
        result = cloudinary.uploader.destroy(public_id, resource_type='image')
    except Exception as e:
        current_app.logger.error(f"❌ Error deleting {public_id} from Cloudinary: {e}", exc_info=True)
        raise ImageUploadException("Failed to delete image")

    if result.get('result') == 'ok':
        current_app.logger.info(f"✅ Deleted {public_id} from Cloudinary")
        return True
    current_app.logger.warning(f"⚠️ Cloudinary did not delete {public_id}: {result.get('result')}")
    return False


def is_cloudinary_url(url):
    return bool(url) and 'res.cloudinary.com' in str(url)


def extract_public_id(url):
    """Extract public_id from a Cloudinary delivery URL."""
    if not url:
        return None
    match = PUBLIC_ID_PATTERN.search(str(url))
    return match.group(1) if match else None
