"""Persistence for learned response profiles."""

from .database import Database
from .models import Base, ResponseProfileRecord

__all__ = ["Database", "Base", "ResponseProfileRecord"]
