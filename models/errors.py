"""Exception hierarchy shared by the pipeline, the mail tools and the HTTP layer."""


class ScoutMailError(Exception):
    """Base class for every error raised by ScoutMail services."""


class ProviderError(ScoutMailError):
    """An LLM or toolkit provider call failed."""

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider


class SearchError(ScoutMailError):
    """The search pipeline could not produce an outcome."""


class CompositionError(ScoutMailError):
    """The model output could not be turned into an email draft."""


class MailSendError(ScoutMailError):
    """Dispatching an email through the connected mailbox failed."""


class MailboxError(ScoutMailError):
    """Linking, checking or subscribing to a mailbox failed."""


class MultipleConnectedAccountsError(MailboxError):
    """The provider refused a new link because accounts already exist."""


class UnknownConnectionError(MailboxError):
    """No pending connection matches the given state token."""
