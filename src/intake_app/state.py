"""Application state management for IntakeApp."""
from dataclasses import dataclass, field
from typing import Optional, List, Dict

from shared.models import FormDraft


@dataclass
class SessionState:
    """Centralized application state.

    The draft survives failed submissions and is only reset after the backend
    accepts it.
    """
    # Form state
    draft: FormDraft = field(default_factory=FormDraft)
    field_errors: Dict[str, str] = field(default_factory=dict)
    submitting: bool = False
    last_submission_id: Optional[str] = None

    # Option lists fetched from the backend
    salesmen: List[str] = field(default_factory=list)
    villages: List[str] = field(default_factory=list)
    building_types: List[str] = field(default_factory=list)
    options_loading: bool = False

    # Admin state
    submissions: List[object] = field(default_factory=list)
    current_submission: Optional[object] = None

    def reset_form_state(self):
        """Start a new form after a successful submission."""
        self.draft.reset()
        self.field_errors = {}
        self.submitting = False

    def clear_admin_state(self):
        self.submissions = []
        self.current_submission = None
