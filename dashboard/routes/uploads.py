"""
Image Upload API Routes
Passes dashboard image uploads through to Cloudinary.
"""

from flask import Blueprint, current_app, request

from dashboard.exceptions import DashboardException
from dashboard.services.activity_service import log_activity
from dashboard.utils.cloudinary_utils import delete_image, extract_public_id, is_cloudinary_url, upload_image
from dashboard.utils.decorators import api_login_required
from dashboard.utils.responses import api_error, api_success, get_json_body

uploads_bp = Blueprint('uploads', __name__, url_prefix='/api/upload')


@uploads_bp.route('/image', methods=['POST'])
@api_login_required
def upload_image_route():
    """
    Upload one image (multipart form).

    Form:
        file: the image
        folder: "products" (default), "appearance" or "countries"
    """
    folder = (request.form.get('folder') or 'products').strip()
    if folder not in current_app.config['UPLOAD_FOLDERS']:
        return api_error('Invalid upload folder', 400)

    try:
        result = upload_image(request.files.get('file'), folder=folder)
    except DashboardException as e:
        return api_error(e.message, e.status_code)
    except Exception as e:
        current_app.logger.error(f'Error uploading image: {e}', exc_info=True)
        return api_error('Failed to upload image', 500)

    log_activity('create', 'image', result['publicId'], f"Uploaded image to {folder}")
    return api_success(result, 201)


@uploads_bp.route('/image', methods=['DELETE'])
@api_login_required
def delete_image_route():
    """
    Request:
        {"publicId": "appearance/abc"} or {"url": "https://res.cloudinary.com/..."}
    """
    data = get_json_body()
    public_id = (data.get('publicId') or '').strip() if isinstance(data.get('publicId'), str) else ''
    url = data.get('url') if isinstance(data.get('url'), str) else ''
    if not public_id and is_cloudinary_url(url):
        public_id = extract_public_id(url) or ''
    if not public_id:
        return api_error('Public ID is required', 400)

    try:
        deleted = delete_image(public_id)
    except DashboardException as e:
        return api_error(e.message, e.status_code)
    except Exception as e:
        current_app.logger.error(f'Error deleting image {public_id}: {e}', exc_info=True)
        return api_error('Failed to delete image', 500)

    log_activity('delete', 'image', public_id, 'Deleted image' if deleted else 'Image was already absent')
    return api_success({'publicId': public_id, 'deleted': deleted})
