"""Dispatch of composed emails through the connected Gmail account."""

from collections.abc import Mapping
from typing import Any, Sequence

from api.base_client import BaseLLMClient, BaseToolkitClient
from models.email import SendResult
from models.errors import MailSendError, ProviderError
from tools.search.normalize import decode_tool_content
from utils.logger import get_logger

from .prompts import SENDER_SYSTEM_PROMPT, build_send_directive

logger = get_logger(__name__)

SEND_TOOL = "GMAIL_SEND_EMAIL"
NOT_CONNECTED_MESSAGE = "Gmail account not connected. Please connect your Gmail account first."


def result_indicates_success(tool_result: Any) -> bool:
    """
    Judge a send result by the absence of failure markers.

    The provider has no positive success field we can rely on, so a result
    is successful unless data.success is False, an error is present, or the
    provider flagged the call as unsuccessful.
    """
    content = decode_tool_content(tool_result)
    if isinstance(content, Mapping):
        data = content.get("data")
        if isinstance(data, Mapping) and data.get("success") is False:
            return False
        if content.get("error"):
            return False
        if content.get("successful") is False:
            return False
    if isinstance(tool_result, Mapping) and tool_result.get("error"):
        return False
    return True


class EmailSender:
    """Sends an email by asking the model to call the Gmail send tool."""

    def __init__(
        self,
        llm: BaseLLMClient,
        toolkit: BaseToolkitClient,
        model: str | None = None,
        default_user_email: str | None = None,
    ):
        self.llm = llm
        self.toolkit = toolkit
        self.model = model
        self.default_user_email = default_user_email

    def has_mailbox(self, user_email: str) -> bool:
        """
        Check for a linked Gmail account, falling back to tool availability.

        Any lookup failure counts as "not connected".
        """
        try:
            accounts = self.toolkit.list_connected_accounts(user_email)
            if any(account.is_gmail for account in accounts):
                return True
        except ProviderError as e:
            logger.warning(f"Connected account lookup failed: {e}")

        try:
            return bool(self.toolkit.get_tools(user_email, [SEND_TOOL]))
        except ProviderError as e:
            logger.warning(f"Send tool lookup failed: {e}")
            return False

    def send(
        self,
        recipient_email: str,
        subject: str,
        body: str,
        is_html: bool = False,
        cc: Sequence[str] = (),
        bcc: Sequence[str] = (),
        user_email: str | None = None,
    ) -> SendResult:
        """
        Send one email.

        Returns:
            SendResult; needs_connection=True when no mailbox is linked

        Raises:
            MailSendError: when the completion or tool execution fails
        """
        user_email = user_email or self.default_user_email
        if not user_email or not self.has_mailbox(user_email):
            logger.info("Send skipped: mailbox not connected")
            return SendResult(success=False, message=NOT_CONNECTED_MESSAGE, needs_connection=True)

        directive = build_send_directive(
            recipient_email, subject, body, is_html, list(cc), list(bcc)
        )
        kwargs: dict[str, Any] = {"tool_choice": "auto"}
        if self.model:
            kwargs["model"] = self.model

        try:
            tools = self.toolkit.get_tools(user_email, [SEND_TOOL])
            completion = self.llm.get_tool_completion(
                [
                    {"role": "system", "content": SENDER_SYSTEM_PROMPT.format(tool=SEND_TOOL)},
                    {"role": "user", "content": directive},
                ],
                tools,
                **kwargs,
            )
            results = self.toolkit.handle_tool_calls(user_email, completion)
        except ProviderError as e:
            raise MailSendError(str(e)) from e

        if not results:
            logger.warning("Send produced no tool result")
            return SendResult(success=False, message="No response from email service")

        first = results[0]
        success = result_indicates_success(first)
        logger.info(
            "Email send attempted",
            extra={"extra_fields": {"success": success, "cc": len(cc), "bcc": len(bcc)}},
        )
        return SendResult(
            success=success,
            message="Email sent successfully!" if success else "Failed to send email",
            details=decode_tool_content(first),
            recipient_email=recipient_email,
            subject=subject,
            user_email=user_email,
        )
