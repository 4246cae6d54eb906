# pipeline/sources/errors.py
#
# Error taxonomy for source adapters.
#
# Design decisions:
#   - These exceptions only live inside an adapter. adapter_boundary (base.py)
#     converts every one of them into a Falha, so nothing here ever reaches
#     the orchestrator as an exception.
#   - The class itself travels on Falha.tipo so tests and logs can tell a
#     timeout from a schema change without parsing messages.
from __future__ import annotations


class AdapterError(Exception):
    """Base class for failures raised inside a source adapter."""


class SourceUnavailableError(AdapterError):
    """Network failure, timeout or non-success HTTP status."""


class MalformedPayloadError(AdapterError):
    """Upstream answered, but not with the shape the adapter expects."""


class NotFoundError(AdapterError):
    """The official is unknown to this source, or the source has no rows."""


class ParseFailureError(AdapterError):
    """A currency or date string could not be parsed."""
