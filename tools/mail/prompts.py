"""Prompt templates for email composition and dispatch."""

from models.email import EmailType

COMPOSER_SYSTEM_PROMPT = (
    "You are an expert email writer who creates personalized, professional emails based on "
    "context. You MUST respond with ONLY valid JSON - no markdown code blocks, no explanations, "
    "just the JSON object."
)

EMAIL_TYPE_INSTRUCTIONS: dict[EmailType, str] = {
    EmailType.PODCAST_REQUEST: """
Create a professional podcast guest request email. The email should:
- Introduce yourself briefly and professionally
- Reference specific details from the chat context about the recipient
- Explain why you'd like them as a guest on your podcast
- Mention specific topics you'd like to discuss based on their expertise
- Be concise but personal
- Include a clear call-to-action
- Maintain a friendly, professional tone
""",
    EmailType.COLD_DM: """
Create a personalized cold outreach email. The email should:
- Start with a genuine compliment or reference to their work
- Use information from the chat context to show you've researched them
- Clearly state your purpose/value proposition
- Keep it short and to the point
- Include a soft call-to-action
- Avoid being pushy or sales-y
- Sound authentic and human
""",
    EmailType.SALES_PITCH: """
Create a professional sales pitch email. The email should:
- Open with a personalized hook based on the chat context
- Identify a specific problem they might have
- Present your solution clearly and concisely
- Include social proof or credibility indicators
- Focus on benefits, not just features
- End with a clear, specific call-to-action
- Maintain professionalism while being persuasive
""",
    EmailType.GENERAL: """
Create a professional, personalized email. The email should:
- Be context-aware based on the chat information
- Have a clear purpose and call-to-action
- Sound natural and conversational
- Be appropriately formal or casual based on context
- Show genuine interest in the recipient
""",
}

RESPONSE_CONTRACT = """IMPORTANT: Respond with ONLY a valid JSON object (no markdown code blocks, no additional text). The JSON should contain:
{
  "subject": "Email subject line",
  "body": "Email body (can include HTML if needed)",
  "isHtml": false,
  "preview": "A brief 2-3 sentence preview of the email content"
}"""

QUALITY_RULES = """Make the email:
- Personalized using details from the chat context
- Professional yet approachable
- Context-appropriate for the email type
- Free of placeholder text like [Your Name] or [Company]
- Ready to send as-is"""

SENDER_SYSTEM_PROMPT = (
    "You are a helpful assistant that can help with sending emails. "
    "Use the {tool} tool to send emails."
)


def build_composition_prompt(
    chat_context: str,
    email_type: EmailType,
    recipient_email: str,
    recipient_name: str | None = None,
    user_context: str | None = None,
) -> str:
    recipient = recipient_email + (f" ({recipient_name})" if recipient_name else "")
    sections = [
        "You are an expert email writer. Based on the following information, "
        "compose a professional and engaging email:",
        f"CHAT CONTEXT (Information about the recipient):\n{chat_context}",
        f"EMAIL TYPE: {email_type.label}",
        f"RECIPIENT: {recipient}",
    ]
    if user_context:
        sections.append(f"ADDITIONAL USER CONTEXT:\n{user_context}")
    sections.append(f"INSTRUCTIONS:\n{EMAIL_TYPE_INSTRUCTIONS[email_type].strip()}")
    sections.append(RESPONSE_CONTRACT)
    sections.append(QUALITY_RULES)
    return "\n\n".join(sections)


def build_send_directive(
    recipient_email: str,
    subject: str,
    body: str,
    is_html: bool = False,
    cc: list[str] | None = None,
    bcc: list[str] | None = None,
) -> str:
    directive = f"Send an email to {recipient_email} with the subject '{subject}' and the body '{body}'"
    if is_html:
        directive += " (HTML format)"
    if cc:
        directive += f" with CC: {', '.join(cc)}"
    if bcc:
        directive += f" with BCC: {', '.join(bcc)}"
    return directive
