"""
This file contains custom, application-specific exceptions.
"""

class NurseAvailabilityError(Exception):
    """Base class for every error raised by the availability editor."""
    pass

class AvailabilityFetchError(NurseAvailabilityError):
    """Raised when the workforce API cannot return a nurse's availability or the nurse list."""
    pass

class AvailabilitySaveError(NurseAvailabilityError):
    """Raised when the workforce API rejects or fails to store a week of availability."""
    pass

class InvalidSlotError(NurseAvailabilityError):
    """Raised when a cell is outside the displayed week or its hour is not in 0-23."""
    pass

class NoNurseSelectedError(NurseAvailabilityError):
    """Raised when an edit is attempted before a nurse and week are selected."""
    pass

class EditorNotFoundError(NurseAvailabilityError):
    """Raised when an editor ID is not found in the registry."""
    pass

class GridNotLoadedError(NurseAvailabilityError):
    """Raised when an edit is attempted while the week is still loading or failed to load."""
    pass
