"""Wire models shared by the HTTP API and the console client."""
from .common import ErrorResponse

__all__ = ["ErrorResponse"]
