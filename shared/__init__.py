"""Shared code of the field sales intake client.

Used by the BeeWare application and the command line tool alike:

- Form models (models.py) - FormDraft and Attachment
- Enums (enums.py) - form field wire names, operators and photo types
- Validation (validation.py, schemas.py) - form rules, messages and pydantic schemas
- Utility functions (utils.py) - coordinate formatting, image type detection and thumbnails
"""
