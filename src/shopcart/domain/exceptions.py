"""Domain-level exceptions.

All recoverable business rule violations are expressed as subclasses of
DomainException so the CLI layer can catch them uniformly and display
user-friendly messages.  InvariantViolation and PriceCalculationError
are deliberately outside that hierarchy: they signal a corrupted event
log or a misbehaving collaborator and must not be shown as user errors.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Malformed input: empty ids, non-positive quantities or prices."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidTransition(DomainException):
    """The command is not allowed for the cart's current state."""


class InsufficientQuantity(DomainException):
    """A removal asked for more units than the cart line holds."""


class EmptyCart(DomainException):
    """A cart without any line items cannot be confirmed."""


class ConcurrencyConflict(DomainException):
    """The cart changed between load and store; retry the whole cycle."""


class InvariantViolation(Exception):
    """An event cannot be applied to the state it was given.

    Only the decider produces events, so this means the stored history
    is corrupt or the decider is broken.  Never retried.
    """


class PriceCalculationError(Exception):
    """The price calculator did not return one priced item per input."""
