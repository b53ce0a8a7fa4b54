"""Input validation for the intake form."""
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from shared.enums import FormField
from shared.models import Attachment, FormDraft
from shared.schemas import FormRecord
from shared.utils import MAX_TOTAL_UPLOAD_BYTES, total_attachment_size


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field


# Messages shown next to each required text field
REQUIRED_MESSAGES = {
    FormField.SALESMAN_NAME: "Salesman name is required",
    FormField.CUSTOMER_NAME: "Customer name is required",
    FormField.CUSTOMER_ADDRESS: "Customer address is required",
    FormField.CUSTOMER_HOME_NO: "Customer Home Number is required",
    FormField.VILLAGE: "Village name is required",
    FormField.BUILDING_TYPE: "Building type is required",
}

COORDINATES_REQUIRED_MESSAGE = "Coordinates are required"
COORDINATES_FORMAT_MESSAGE = "Invalid coordinates format. e.g: 3.456,89.012 or -3.456,-89.012"
OPERATORS_MESSAGE = "At least one operator is required"
INVALID_FILES_MESSAGE = "Please provide valid files"
FILE_SIZE_MESSAGE = "Maximum total file size is 10 MB"
REMARKS_MESSAGE = "Remarks must be text"


class Validator:
    """Validation rules for the intake form fields.

    Each rule returns the cleaned value or raises ValidationError.
    """

    COORDINATE_PATTERN = re.compile(r'^(-?\d+(\.\d+)?),\s*(-?\d+(\.\d+)?)$', re.ASCII)

    @staticmethod
    def validate_required(value, message):
        """Validate that a required text field is not empty."""
        if value is None or not isinstance(value, str) or value == '':
            raise ValidationError(message)
        return value

    @staticmethod
    def validate_coordinates(value):
        """Validate a "<lat>,<lon>" pair of signed decimals."""
        if value is None or not isinstance(value, str) or value == '':
            raise ValidationError(COORDINATES_REQUIRED_MESSAGE, FormField.COORDINATES.value)
        if not Validator.COORDINATE_PATTERN.fullmatch(value):
            raise ValidationError(COORDINATES_FORMAT_MESSAGE, FormField.COORDINATES.value)
        return value

    @staticmethod
    def validate_operators(value):
        """Validate that at least one operator tag is selected."""
        if not isinstance(value, (list, tuple)) or len(value) < 1:
            raise ValidationError(OPERATORS_MESSAGE, FormField.OPERATORS.value)
        if not all(isinstance(item, str) for item in value):
            raise ValidationError(OPERATORS_MESSAGE, FormField.OPERATORS.value)
        return list(value)

    @staticmethod
    def validate_attachments(value, max_total_bytes=MAX_TOTAL_UPLOAD_BYTES):
        """Validate optional photo attachments.

        Every element must be an Attachment and the combined size must not
        exceed max_total_bytes.
        """
        if value is None:
            return []
        if isinstance(value, Attachment):
            value = [value]
        if not isinstance(value, (list, tuple)) or not all(isinstance(item, Attachment) for item in value):
            raise ValidationError(INVALID_FILES_MESSAGE, FormField.BUILDING_PHOTOS.value)
        if total_attachment_size(value) > max_total_bytes:
            raise ValidationError(FILE_SIZE_MESSAGE, FormField.BUILDING_PHOTOS.value)
        return list(value)

    @staticmethod
    def validate_remarks(value):
        """Remarks are free text and may be empty."""
        if value is None:
            return ''
        if not isinstance(value, str):
            raise ValidationError(REMARKS_MESSAGE, FormField.REMARKS.value)
        return value


@dataclass
class FormValidationResult:
    """Outcome of validate_form_record: a valid record or per-field errors."""
    record: Optional[FormRecord] = None
    field_errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self):
        return self.record is not None and not self.field_errors


def validate_form_record(record, max_total_bytes=MAX_TOTAL_UPLOAD_BYTES):
    """Validate an intake form without side effects.

    Args:
        record: FormDraft, or a mapping keyed by wire field names
        max_total_bytes: ceiling on the combined attachment size

    Returns:
        FormValidationResult: the validated FormRecord, or every field error
            keyed by wire field name
    """
    data = record.to_dict() if isinstance(record, FormDraft) else dict(record or {})
    errors = {}
    validated = {}

    for form_field, message in REQUIRED_MESSAGES.items():
        try:
            validated[form_field.value] = Validator.validate_required(data.get(form_field.value), message)
        except ValidationError as e:
            errors[form_field.value] = e.message

    checks = (
        (FormField.COORDINATES, Validator.validate_coordinates),
        (FormField.OPERATORS, Validator.validate_operators),
        (FormField.REMARKS, Validator.validate_remarks),
    )
    for form_field, check in checks:
        try:
            validated[form_field.value] = check(data.get(form_field.value))
        except ValidationError as e:
            errors[form_field.value] = e.message

    try:
        validated[FormField.BUILDING_PHOTOS.value] = Validator.validate_attachments(
            data.get(FormField.BUILDING_PHOTOS.value), max_total_bytes
        )
    except ValidationError as e:
        errors[FormField.BUILDING_PHOTOS.value] = e.message

    if errors:
        return FormValidationResult(field_errors=errors)
    return FormValidationResult(record=FormRecord(**validated))
