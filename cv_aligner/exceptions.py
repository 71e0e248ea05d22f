"""Errors raised while turning a ResumeDocument into a .docx."""

from __future__ import annotations
from typing import Iterable, Optional, Tuple


class ComposerError(Exception):
	"""Base class for every composition failure."""


class ValidationError(ComposerError, ValueError):
	"""
	Input does not satisfy the ResumeDocument contract.

	Attributes:
		fields: JSON field names that failed (e.g. 'name', 'professionalSummary')
	"""

	def __init__(self, message: str, fields: Optional[Iterable[str]] = None):
		self.message = message
		self.fields: Tuple[str, ...] = tuple(fields or ())
		parts = [message]
		if self.fields:
			parts.append(f"fields: {', '.join(self.fields)}")
		super().__init__(" | ".join(parts))


class AssetUnavailable(ComposerError):
	"""A static asset (the brand logo) could not be used. Never fatal."""

	def __init__(self, message: str, path=None):
		self.message = message
		self.path = path
		super().__init__(f"{message}: {path}" if path else message)


class SerializationError(ComposerError):
	"""The document package could not be built or written."""

	def __init__(self, message: str, original_error: Optional[Exception] = None):
		self.message = message
		self.original_error = original_error
		if original_error is not None:
			message = f"{message}: {original_error}"
		super().__init__(message)
