"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class ChannelTransportError(AdapterError):
    """The push channel connection failed or was dropped."""

    pass


class ChannelExhaustedError(AdapterError):
    """Reconnect attempts ran out; real-time updates are unavailable."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Failed to reconnect to comment stream after {attempts} attempts")
