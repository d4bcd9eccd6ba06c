"""CaseDesk: legal practice management API and client library."""

__version__ = "0.1.0"
