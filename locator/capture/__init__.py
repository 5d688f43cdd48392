"""Screen capture and click backends."""

from .backend import CaptureBackend, PyAutoGuiBackend

__all__ = ['CaptureBackend', 'PyAutoGuiBackend']
