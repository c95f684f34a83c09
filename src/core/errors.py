# core/errors.py
from __future__ import annotations


class SongGenError(RuntimeError):
    """Base class for failures that are reported to the user, never fatal."""


class NoValidJobs(SongGenError):
    """Every job in the batch was missing its mode-required field."""


class SubmissionTransportError(SongGenError):
    """A single generation request could not be delivered or was rejected."""


class RefreshTransportError(SongGenError):
    """The library read failed (network, HTTP status or malformed payload)."""


class RetrievalTransportError(SongGenError):
    """A single audio artifact could not be fetched or written."""
