# cipdesign/db/models/__init__.py

from .base import Base, UUIDMixin, TimestampMixin
from .design_run import DesignRun

__all__ = ["Base", "UUIDMixin", "TimestampMixin", "DesignRun"]
