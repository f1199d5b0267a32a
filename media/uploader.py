# media/uploader.py
import os
import logging

import requests
from werkzeug.utils import secure_filename

from shared_globals import allowed_file

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"
REQUEST_TIMEOUT = 30


def upload_image(file):
    """
    Uploads an image (werkzeug FileStorage) to Cloudinary with the unsigned upload preset.
    Returns the hosted https URL, or None when the upload fails.
    Raises ValueError for a missing or disallowed file and RuntimeError when Cloudinary is not configured.
    """
    if not file or not file.filename or not allowed_file(file.filename):
        raise ValueError("Invalid file or format. Allowed: png, jpg, jpeg, gif, webp")

    cloud_name = os.environ.get('CLOUDINARY_CLOUD_NAME')
    if not cloud_name:
        raise RuntimeError("CLOUDINARY_CLOUD_NAME not configured")
    upload_preset = os.environ.get('CLOUDINARY_UPLOAD_PRESET', 'ml_default')

    filename = secure_filename(file.filename)
    try:
        response = requests.post(
            CLOUDINARY_UPLOAD_URL.format(cloud_name=cloud_name),
            data={"upload_preset": upload_preset},
            files={"file": (filename, file.stream, file.mimetype)},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error(f"Error uploading image {filename}: {e}")
        return None

    if response.status_code != 200:
        logger.error(f"Cloudinary rejected {filename}: {response.status_code} {response.text[:200]}")
        return None

    url = response.json().get('secure_url')
    logger.info(f"Image uploaded: {url}")
    return url
