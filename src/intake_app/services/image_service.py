"""Image service for turning picked photo files into attachments."""
import os
import logging

from shared.enums import PhotoType
from shared.models import Attachment
from shared.utils import CorruptedImageError, detect_image_content_type, generate_thumbnail, guess_content_type


class ImageService:
    """Loads photo files picked by the user into Attachment objects."""

    ACCEPTED_TYPES = {photo_type.value for photo_type in PhotoType}

    def __init__(self, thumbnail_max_size=120):
        self.thumbnail_max_size = thumbnail_max_size
        self.logger = logging.getLogger(self.__class__.__name__)

    def load_attachment(self, path):
        """Build an Attachment for a photo on disk.

        The content type comes from the image bytes, not the file name, so a
        renamed file is still labelled correctly.

        Raises:
            FileNotFoundError: When the path does not exist
            CorruptedImageError: When the file is not a readable image, or
                not one of the accepted photo formats
        """
        path = os.fspath(path)
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Photo not found: {path}")

        content_type = detect_image_content_type(image_path=path) or guess_content_type(path)
        if content_type not in self.ACCEPTED_TYPES:
            raise CorruptedImageError(f"Unsupported photo format: {content_type}")

        attachment = Attachment.from_path(path, content_type=content_type)
        self.logger.debug(f"Loaded photo {attachment.filename} ({content_type}, {attachment.size} bytes)")
        return attachment

    def load_attachments(self, paths):
        """Load several photos, collecting the ones that failed.

        Returns:
            tuple: (attachments, {path: error message})
        """
        attachments = []
        failures = {}
        for path in paths or []:
            try:
                attachments.append(self.load_attachment(path))
            except (OSError, CorruptedImageError) as e:
                self.logger.warning(f"Skipping photo {path}: {e}")
                failures[os.fspath(path)] = str(e)
        return attachments, failures

    def thumbnail_for(self, attachment):
        """Preview bytes for an attachment, None when no preview can be made."""
        try:
            if attachment.path:
                return generate_thumbnail(image_path=attachment.path, max_size=self.thumbnail_max_size)
            return generate_thumbnail(image_data=attachment.read(), max_size=self.thumbnail_max_size)
        except (OSError, CorruptedImageError) as e:
            self.logger.warning(f"No preview for {attachment.filename}: {e}")
            return None
