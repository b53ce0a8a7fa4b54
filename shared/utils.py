"""Shared utility functions for the Field Intake application.

Coordinate formatting, attachment size accounting and image inspection used
by both the Toga client and the command line interface.
"""

import io
import logging
import mimetypes
from functools import wraps
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Ceiling on the combined size of all photos attached to one submission
MAX_TOTAL_UPLOAD_BYTES = 10 * 1024 * 1024

DEFAULT_CONTENT_TYPE = 'application/octet-stream'


class CorruptedImageError(Exception):
    """Raised when image data is corrupted and cannot be processed."""
    pass


def handle_image_errors(func):
    """Decorator to handle image processing errors consistently.

    Unreadable or unsupported images become CorruptedImageError. The decorated
    function should take image_path and/or image_data as keyword arguments so
    the log message can name the source.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        image_path = kwargs.get('image_path')
        image_data = kwargs.get('image_data')

        def log_and_raise(msg, exc):
            error_source = f"file '{image_path}'" if image_path else f"image data (size: {len(image_data) if image_data else 0} bytes)"
            logger.error(f"{msg} - {error_source}: {exc}")
            raise CorruptedImageError(f"{msg}: {exc}") from exc

        try:
            return func(*args, **kwargs)
        except UnidentifiedImageError as e:
            log_and_raise("Corrupted or unsupported image format", e)
        except OSError as e:
            if "cannot identify image file" in str(e).lower() or "truncated" in str(e).lower():
                log_and_raise("Corrupted image file", e)
            raise
        except ValueError as e:
            log_and_raise("Error processing image", e)

    return wrapper


def format_coordinate(coord):
    """Format a single coordinate in fixed-point notation.

    Avoids the exponent form Python uses for very small floats (1e-05), which
    the coordinates pattern would reject.
    """
    text = f"{float(coord):.10f}".rstrip('0').rstrip('.')
    if text in ('', '-0'):
        return '0'
    return text


def format_coordinates(latitude, longitude):
    """Format a latitude/longitude pair as the "<lat>,<lon>" form value."""
    return f"{format_coordinate(latitude)},{format_coordinate(longitude)}"


def total_attachment_size(attachments):
    """Sum of the sizes of the given attachments, in bytes."""
    if not attachments:
        return 0
    return sum(attachment.size for attachment in attachments)


def format_file_size(size_bytes):
    """Human readable file size, e.g. "2.4 MB"."""
    size = float(size_bytes)
    for unit in ('B', 'KB', 'MB'):
        if size < 1024 or unit == 'MB':
            if unit == 'B':
                return f"{int(size)} {unit}"
            return f"{size:.1f} {unit}"
        size /= 1024


def guess_content_type(filename):
    """Guess a content type from a file name, defaulting to octet-stream."""
    content_type, _ = mimetypes.guess_type(filename or '')
    return content_type or DEFAULT_CONTENT_TYPE


@handle_image_errors
def detect_image_content_type(image_data=None, image_path=None):
    """Identify the content type of an image by inspecting its bytes.

    Args:
        image_data (bytes, optional): Raw image bytes
        image_path (str, optional): Path to an image file on disk

    Returns:
        str or None: MIME type reported by Pillow, None when Pillow knows the
            format but has no MIME type for it

    Raises:
        CorruptedImageError: When the data is not a readable image.
    """
    if image_path:
        img = Image.open(image_path)
    else:
        img = Image.open(io.BytesIO(image_data))
    with img:
        return Image.MIME.get(img.format)


@handle_image_errors
def generate_thumbnail(image_data=None, image_path=None, max_size=200):
    """Generate a thumbnail from image data or file path while maintaining aspect ratio.

    Used for the photo previews on the intake form. Preserves PNG/WEBP to keep
    transparency, otherwise uses JPEG.

    Returns:
        bytes or None: Thumbnail data, None when called without a source

    Raises:
        CorruptedImageError: When image data is corrupted and cannot be processed.
    """
    if not image_data and not image_path:
        logger.warning("generate_thumbnail called without image_data or image_path")
        return None

    if image_path:
        img = Image.open(image_path)
    else:
        img = Image.open(io.BytesIO(image_data))

    img.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)

    original_format = img.format
    save_format = original_format if original_format in ('PNG', 'WEBP') else 'JPEG'

    # JPEG has no alpha channel
    if save_format == 'JPEG' and img.mode in ('RGBA', 'P', 'LA'):
        img = img.convert('RGB')

    thumb_buffer = io.BytesIO()
    img.save(thumb_buffer, format=save_format, quality=85)
    return thumb_buffer.getvalue()
