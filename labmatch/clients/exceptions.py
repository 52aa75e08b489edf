class ClientError(Exception):
    """Base exception for client identity resolution."""


class ClientRecordError(ClientError, ValueError):
    """Raised when a candidate client record lacks its identity key."""
