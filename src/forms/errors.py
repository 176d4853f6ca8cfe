"""Domain errors raised by the form builder, renderer, records view and stores.

All of them are scoped to the single action that raised them; the API layer
turns them into an HTTP error for that request and nothing more.
"""

from __future__ import annotations


class FormError(Exception):
    """Base class for every form-subsystem failure."""


class ValidationError(FormError):
    """Local, pre-network rejection (bad section key, missing name, ...)."""


class FetchError(FormError):
    """A template or entity load failed at the store."""


class WriteError(FormError):
    """A create/update/delete failed at the store. Local state is untouched."""


class NotFoundError(FormError):
    """The edit/view/delete target no longer exists."""


class ConfirmationRequiredError(FormError):
    """A save, submit-edit or delete was attempted without the confirm step."""


class InvalidTransitionError(FormError):
    """The renderer session refused a trigger in its current state."""
