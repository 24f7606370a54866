"""Domain helpers shared by the upload and artifact pipelines."""

from .identifiers import new_id

__all__ = ["new_id"]
