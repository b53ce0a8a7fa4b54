"""Validation, multipart encoding and submission of the intake form."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from shared.enums import FormField
from shared.models import Attachment
from shared.utils import MAX_TOTAL_UPLOAD_BYTES
from shared.validation import validate_form_record
from .api_service import APIError

DEFAULT_FAILURE_MESSAGE = "Failed to submit form"
UNEXPECTED_FAILURE_MESSAGE = "Something went wrong while submitting the form. Please try again."


@dataclass
class MultipartPart:
    """One named part of a multipart/form-data body."""
    name: str
    value: Union[str, Attachment]

    @property
    def is_file(self):
        return isinstance(self.value, Attachment)

    @property
    def filename(self):
        return self.value.filename if self.is_file else None

    @property
    def content_type(self):
        return self.value.content_type if self.is_file else None


class MultipartPayload:
    """Ordered multipart parts; names may repeat."""

    def __init__(self):
        self.parts: List[MultipartPart] = []

    def add_field(self, name, value):
        self.parts.append(MultipartPart(name, '' if value is None else str(value)))

    def add_file(self, name, attachment):
        self.parts.append(MultipartPart(name, attachment))

    def get_all(self, name):
        """Parts with the given name, in order."""
        return [part for part in self.parts if part.name == name]

    def names(self):
        return [part.name for part in self.parts]

    def to_files(self):
        """Parts in the list form requests turns into a multipart body.

        Plain fields get a None filename so they are sent as form fields.
        File contents are read here, when the request is being built.
        """
        files = []
        for part in self.parts:
            if part.is_file:
                files.append((part.name, (part.filename, part.value.read(), part.content_type)))
            else:
                files.append((part.name, (None, part.value)))
        return files

    def __len__(self):
        return len(self.parts)


def encode_submission(record):
    """Encode a validated FormRecord as a multipart payload.

    Fields keep their wire names and schema order. List fields become one
    part per element under the same name; each photo is its own
    buildingPhotos part carrying its filename and content type.
    """
    payload = MultipartPayload()
    values = record.model_dump(by_alias=True, exclude={'building_photos'})
    for name, value in values.items():
        if isinstance(value, list):
            for item in value:
                payload.add_field(name, item)
        else:
            payload.add_field(name, value)

    for attachment in record.building_photos:
        payload.add_file(FormField.BUILDING_PHOTOS.value, attachment)
    return payload


@dataclass
class SubmissionOutcome:
    """What happened to one submit attempt.

    Exactly one of submission_id (success), field_errors (validation) or
    message (anything else) describes the result.
    """
    success: bool = False
    submission_id: Optional[str] = None
    message: Optional[str] = None
    field_errors: Dict[str, str] = field(default_factory=dict)

    @property
    def has_field_errors(self):
        return bool(self.field_errors)


class FormPipeline:
    """Validates a draft, encodes it and sends it to the backend.

    The draft is only read, never changed, so a failed attempt can be retried
    without re-entering data.
    """

    def __init__(self, api_service, max_upload_bytes=MAX_TOTAL_UPLOAD_BYTES):
        self.api_service = api_service
        self.max_upload_bytes = max_upload_bytes
        self.logger = logging.getLogger(self.__class__.__name__)

    def validate(self, draft):
        return validate_form_record(draft, self.max_upload_bytes)

    def submit(self, draft):
        result = self.validate(draft)
        if not result.is_valid:
            self.logger.info(f"Submission blocked by {len(result.field_errors)} field error(s)")
            return SubmissionOutcome(field_errors=dict(result.field_errors))

        try:
            payload = encode_submission(result.record)
            self.logger.debug(f"Submitting form with parts: {payload.names()}")
            response = self.api_service.submit_form(payload)
        except APIError as e:
            self.logger.error(f"Error submitting form: {e.message}")
            return SubmissionOutcome(message=e.message or DEFAULT_FAILURE_MESSAGE)
        except OSError as e:
            self.logger.error(f"Could not read attachment: {e}")
            return SubmissionOutcome(message=f"Could not read a photo: {e}")
        except Exception:
            self.logger.exception("Unexpected error submitting form")
            return SubmissionOutcome(message=UNEXPECTED_FAILURE_MESSAGE)

        if response.success:
            self.logger.info(f"Form submitted, id={response.submission_id}")
            return SubmissionOutcome(success=True, submission_id=response.submission_id, message=response.message)

        self.logger.warning(f"Backend refused submission: {response.message}")
        return SubmissionOutcome(message=response.message or DEFAULT_FAILURE_MESSAGE)
