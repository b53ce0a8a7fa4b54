"""Tests for shared validation utilities."""
import pytest

from shared.enums import FormField
from shared.models import Attachment, FormDraft
from shared.schemas import FormRecord
from shared.validation import (
    Validator, ValidationError, validate_form_record,
    COORDINATES_FORMAT_MESSAGE, COORDINATES_REQUIRED_MESSAGE, FILE_SIZE_MESSAGE,
    INVALID_FILES_MESSAGE, OPERATORS_MESSAGE, REMARKS_MESSAGE, REQUIRED_MESSAGES,
)

TEN_MB = 10 * 1024 * 1024


class TestValidator:
    """Test field validation rules."""

    def test_validate_required_success(self):
        assert Validator.validate_required("Ahmad", "Salesman name is required") == "Ahmad"

    def test_validate_required_accepts_whitespace(self):
        assert Validator.validate_required("  ", "Customer name is required") == "  "

    def test_validate_required_failure(self):
        for value in ("", None):
            with pytest.raises(ValidationError, match="Salesman name is required"):
                Validator.validate_required(value, "Salesman name is required")

    @pytest.mark.parametrize("value", ["3.456,89.012", "-3.456,-89.012", "3,89", "3.456, 89.012"])
    def test_validate_coordinates_success(self, value):
        assert Validator.validate_coordinates(value) == value

    @pytest.mark.parametrize("value", ["3.456", "abc,def", "3.456,", ",89.012", "3.,89", "3.456,89.012\n", "+3.4,5.6"])
    def test_validate_coordinates_bad_format(self, value):
        with pytest.raises(ValidationError) as exc_info:
            Validator.validate_coordinates(value)
        assert exc_info.value.message == COORDINATES_FORMAT_MESSAGE
        assert exc_info.value.field == 'coordinates'

    def test_validate_coordinates_empty(self):
        with pytest.raises(ValidationError, match=COORDINATES_REQUIRED_MESSAGE):
            Validator.validate_coordinates("")

    def test_validate_coordinates_blank_is_bad_format(self):
        with pytest.raises(ValidationError) as exc_info:
            Validator.validate_coordinates(" ")
        assert exc_info.value.message == COORDINATES_FORMAT_MESSAGE

    def test_validate_operators(self):
        assert Validator.validate_operators(["CGS"]) == ["CGS"]
        with pytest.raises(ValidationError, match=OPERATORS_MESSAGE):
            Validator.validate_operators([])
        with pytest.raises(ValidationError, match=OPERATORS_MESSAGE):
            Validator.validate_operators(None)

    def test_validate_attachments_optional(self):
        assert Validator.validate_attachments(None) == []
        assert Validator.validate_attachments([]) == []

    def test_validate_attachments_size_boundary(self):
        exactly = [Attachment.from_bytes('a.jpg', b'x' * (TEN_MB // 2)),
                   Attachment.from_bytes('b.jpg', b'x' * (TEN_MB // 2))]
        assert len(Validator.validate_attachments(exactly)) == 2

        over = exactly + [Attachment.from_bytes('c.jpg', b'x')]
        with pytest.raises(ValidationError, match=FILE_SIZE_MESSAGE):
            Validator.validate_attachments(over)

    def test_validate_attachments_rejects_non_files(self):
        with pytest.raises(ValidationError, match=INVALID_FILES_MESSAGE):
            Validator.validate_attachments(["photo.jpg"])
        with pytest.raises(ValidationError, match=INVALID_FILES_MESSAGE):
            Validator.validate_attachments("photo.jpg")

    def test_validate_single_attachment_is_wrapped(self):
        photo = Attachment.from_bytes('a.jpg', b'abc')
        assert Validator.validate_attachments(photo) == [photo]

    def test_validate_remarks(self):
        assert Validator.validate_remarks(None) == ''
        assert Validator.validate_remarks('') == ''
        with pytest.raises(ValidationError, match=REMARKS_MESSAGE):
            Validator.validate_remarks(42)


class TestValidateFormRecord:
    """Test whole-form validation."""

    def test_valid_draft_gives_record(self, valid_draft):
        result = validate_form_record(valid_draft)
        assert result.is_valid
        assert isinstance(result.record, FormRecord)
        assert result.record.operators == ['CGS', 'FS']
        assert [p.filename for p in result.record.building_photos] == ['a.jpg', 'b.png', 'c.webp']

    def test_empty_draft_collects_every_error(self):
        result = validate_form_record(FormDraft())
        assert not result.is_valid
        assert result.record is None
        for form_field, message in REQUIRED_MESSAGES.items():
            assert result.field_errors[form_field.value] == message
        assert result.field_errors['coordinates'] == COORDINATES_REQUIRED_MESSAGE
        assert result.field_errors['operators'] == OPERATORS_MESSAGE
        assert 'remarks' not in result.field_errors
        assert 'buildingPhotos' not in result.field_errors

    def test_accepts_mapping_with_wire_names(self, valid_draft):
        data = valid_draft.to_dict()
        data[FormField.COORDINATES.value] = "abc,def"
        result = validate_form_record(data)
        assert result.field_errors == {'coordinates': COORDINATES_FORMAT_MESSAGE}

    def test_size_limit_is_configurable(self, valid_draft):
        result = validate_form_record(valid_draft, max_total_bytes=59)
        assert result.field_errors == {'buildingPhotos': FILE_SIZE_MESSAGE}

    def test_whitespace_text_is_accepted(self, valid_draft):
        valid_draft.customer_name = "  "
        result = validate_form_record(valid_draft)
        assert result.is_valid
        assert result.record.customer_name == "  "

    def test_validation_does_not_change_draft(self, valid_draft):
        before = valid_draft.to_dict()
        validate_form_record(valid_draft)
        assert valid_draft.to_dict() == before
