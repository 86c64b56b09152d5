"""Exception hierarchy shared by the channel, config loader and supervisor."""


class ControllerError(Exception):
    """Base class for every error the controller raises on purpose."""


class ConfigError(ControllerError):
    pass


class ChannelError(ControllerError):
    """Process variable channel failure. Always aborts the current tick."""

    kind = "channel"


class ChannelTimeout(ChannelError):
    kind = "timeout"


class ChannelUnavailable(ChannelError):
    kind = "unavailable"


class WriteRejected(ChannelError):
    kind = "write-rejected"


class ParseFailure(ChannelError):
    kind = "parse"
