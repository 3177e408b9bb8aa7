"""JSON Form Builder: validate, highlight and send JSON documents to HTTP APIs."""

__version__ = "1.0.0"
