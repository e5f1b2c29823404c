class ClearanceBotError(Exception):
    """Base class for errors raised by the clearance bot"""


class ConfigurationError(ClearanceBotError):
    """Required credentials or identifiers are missing at startup"""


class CommandUsageError(ClearanceBotError):
    """A /grant or /revoke command was invoked with bad arguments"""


class PlatformOperationFailure(ClearanceBotError):
    """The workspace refused or failed a grant/revoke call"""


class LastMemberError(PlatformOperationFailure):
    """Slack does not allow a user group to be left with no members"""
