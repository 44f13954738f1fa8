"""
Image Storage
=============

Saves project images to the configured directory under a fresh unique
name and returns the public URL that serves them.
"""

import base64
import io
import os
import uuid
import logging

from PIL import Image, UnidentifiedImageError

from .config import Config, get_config_value

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif'}

# Pillow format names per extension
_FORMATS = {'png': 'PNG', 'jpg': 'JPEG', 'jpeg': 'JPEG', 'gif': 'GIF'}


class ImageStorageError(Exception):
    """The chosen image could not be read, decoded or written."""


def allowed_file(filename):
    return bool(filename) and '.' in filename and \
        filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def _extension(filename):
    if not allowed_file(filename):
        raise ImageStorageError(
            f"Unsupported image type. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}")
    return filename.rsplit('.', 1)[1].lower()


def _open_image(file_bytes):
    try:
        img = Image.open(io.BytesIO(file_bytes))
        img.load()
        return img
    except (UnidentifiedImageError, OSError) as e:
        raise ImageStorageError(f"Could not read image: {e}") from e


def save_image(file_bytes, original_filename):
    """Re-encode an uploaded image in its own format and store it.

    Args:
        file_bytes: Raw bytes of the chosen file.
        original_filename: Name the file was uploaded with; only the extension is kept.

    Returns:
        Public URL, i.e. PROJECT_IMAGE_BASE_URL + "<uuid>.<ext>".

    Raises:
        ImageStorageError on any read, decode or write failure.
    """
    ext = _extension(original_filename)
    img = _open_image(file_bytes)

    image_format = _FORMATS[ext]
    if image_format == 'JPEG' and img.mode not in ('RGB', 'L'):
        img = img.convert('RGB')

    upload_dir = get_config_value('PROJECT_IMAGE_DIR', Config.PROJECT_IMAGE_DIR)
    base_url = get_config_value('PROJECT_IMAGE_BASE_URL', Config.PROJECT_IMAGE_BASE_URL)
    unique_filename = f"{uuid.uuid4().hex}.{ext}"

    try:
        os.makedirs(upload_dir, exist_ok=True)
        filepath = os.path.join(upload_dir, unique_filename)
        img.save(filepath, format=image_format)
    except OSError as e:
        raise ImageStorageError(f"Could not save image: {e}") from e

    logger.info("Saved project image %s", filepath)
    if not base_url.endswith('/'):
        base_url += '/'
    return f"{base_url}{unique_filename}"


def preview_image(file_bytes, original_filename, max_size=None):
    """Return a PNG data URI of the image scaled to fit max_size x max_size."""
    _extension(original_filename)
    img = _open_image(file_bytes)

    size = max_size or int(get_config_value('IMAGE_PREVIEW_SIZE', Config.IMAGE_PREVIEW_SIZE))
    img.thumbnail((size, size))
    if img.mode not in ('RGB', 'RGBA'):
        img = img.convert('RGBA')

    buf = io.BytesIO()
    img.save(buf, format='PNG')
    encoded = base64.b64encode(buf.getvalue()).decode('ascii')
    return {
        'data_uri': f"data:image/png;base64,{encoded}",
        'width': img.width,
        'height': img.height,
    }
