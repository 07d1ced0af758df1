# src/messaging/domain/__init__.py
from . import models, exceptions

__all__ = ["models", "exceptions"]
