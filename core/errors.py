#!/usr/bin/env python3
"""
Service-layer exceptions.

Every operation detects these before mutating anything. The web layer maps
each class to an HTTP status in ``web.backend.exceptions``.
"""


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceException):
    """Referenced project, freelancer, user, chat room or notification is absent."""
    pass


class NotAuthenticatedError(ServiceException):
    """No caller identity was supplied."""
    pass


class NotAuthorizedError(ServiceException):
    """Caller lacks rights over the referenced entity."""
    pass


class NotOwnerError(NotAuthorizedError):
    """Caller does not own the project."""
    pass


class NotParticipantError(NotAuthorizedError):
    """Caller is not on the selected team or in the chat room."""
    pass


class InvalidStateError(ServiceException):
    """Operation attempted outside the state it requires."""
    pass


class AlreadyRespondedError(ServiceException):
    """Freelancer already accepted or rejected this invitation."""
    pass


class NoneAvailableError(ServiceException):
    """Candidate pool is empty."""
    pass


class NoFreelancersAvailableError(NoneAvailableError):
    """Designer or developer pool is empty when building offers."""
    pass


class PaymentRequiredError(ServiceException):
    """Paid tier selected without a payment confirmation."""
    pass


class PaymentFailedError(ServiceException):
    """Payment confirmation did not verify."""
    pass


class ValidationError(ServiceException):
    """Malformed input, e.g. unknown tier or role."""
    pass


class ConcurrentUpdateError(ServiceException):
    """Project was modified by another request between read and write."""
    pass
