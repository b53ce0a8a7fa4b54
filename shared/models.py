"""Client-side data models for the intake form."""
import os
from dataclasses import dataclass, field, fields
from typing import List, Optional

from shared.enums import FormField
from shared.utils import guess_content_type


# Draft attribute backing each wire field
DRAFT_ATTRIBUTES = {
    FormField.SALESMAN_NAME: 'salesman_name',
    FormField.CUSTOMER_NAME: 'customer_name',
    FormField.CUSTOMER_ADDRESS: 'customer_address',
    FormField.CUSTOMER_HOME_NO: 'customer_home_no',
    FormField.VILLAGE: 'village',
    FormField.COORDINATES: 'coordinates',
    FormField.BUILDING_TYPE: 'building_type',
    FormField.OPERATORS: 'operators',
    FormField.REMARKS: 'remarks',
    FormField.BUILDING_PHOTOS: 'building_photos',
}


class Attachment:
    """A file picked for upload.

    Either holds its bytes in memory or points at a file on disk; the content
    is only read from disk when the payload is sent. Validation accepts
    instances of this class and nothing else as building photos.
    """

    def __init__(self, filename, content_type=None, data=None, path=None):
        if data is None and path is None:
            raise ValueError("Attachment needs either data or a path")
        self.filename = filename
        self.content_type = content_type or guess_content_type(filename)
        self.path = path
        self._data = data

    @classmethod
    def from_path(cls, path, content_type=None):
        return cls(os.path.basename(path), content_type=content_type, path=path)

    @classmethod
    def from_bytes(cls, filename, data, content_type=None):
        return cls(filename, content_type=content_type, data=data)

    @property
    def size(self):
        """Size in bytes."""
        if self._data is not None:
            return len(self._data)
        return os.path.getsize(self.path)

    def read(self):
        """Return the attachment content."""
        if self._data is not None:
            return self._data
        with open(self.path, 'rb') as f:
            return f.read()

    def __repr__(self):
        return f"Attachment(filename={self.filename!r}, content_type={self.content_type!r})"


@dataclass
class FormDraft:
    """In-memory, not yet submitted intake form.

    Created empty when the form is shown and never persisted. A failed
    submission leaves it untouched so the user can retry.
    """
    salesman_name: str = ''
    customer_name: str = ''
    customer_address: str = ''
    customer_home_no: str = ''
    village: str = ''
    coordinates: str = ''
    building_type: str = ''
    operators: List[str] = field(default_factory=list)
    remarks: str = ''
    building_photos: List[Attachment] = field(default_factory=list)

    def to_dict(self):
        """Return the draft keyed by wire field names."""
        return {
            form_field.value: getattr(self, attribute)
            for form_field, attribute in DRAFT_ATTRIBUTES.items()
        }

    def set_field(self, name, value):
        """Set a field by its wire name."""
        setattr(self, DRAFT_ATTRIBUTES[FormField(name)], value)

    def get_field(self, name):
        return getattr(self, DRAFT_ATTRIBUTES[FormField(name)])

    def toggle_operator(self, operator, enabled):
        """Add or remove an operator tag, keeping selection order."""
        if enabled and operator not in self.operators:
            self.operators.append(operator)
        elif not enabled and operator in self.operators:
            self.operators.remove(operator)

    def reset(self):
        """Clear every field back to its empty value."""
        empty = FormDraft()
        for f in fields(self):
            setattr(self, f.name, getattr(empty, f.name))

    def photo_names(self) -> List[str]:
        return [photo.filename for photo in self.building_photos if isinstance(photo, Attachment)]

    def find_photo(self, filename) -> Optional[Attachment]:
        return next((p for p in self.building_photos if getattr(p, 'filename', None) == filename), None)
