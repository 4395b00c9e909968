"""Extraction of artifacts from message bodies."""

from artifact_export.extract.normalizer import normalize
from artifact_export.extract.parser import extract

__all__ = ["extract", "normalize"]
