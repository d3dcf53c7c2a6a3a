'''
Nurse availability editor backend.

Holds the weekly 7x24 availability grid for a nurse, the codec that turns it
into the range records the workforce API persists, and the FastAPI surface
the dashboard talks to.
'''
__version__ = "0.1.0"
