"""Parsing of RFC 2822 message files.

Uses Python's email.parser module directly. The parsed object is treated
as an opaque handle: callers only ask it for header values and body lines.
"""

import re
from email import policy
from email.header import decode_header, make_header
from email.message import Message as MimeMessage
from email.parser import BytesParser
from pathlib import Path

from lettre.errors import MaildirError


def parse_message(path: str | Path) -> MimeMessage:
    """Parse a message file.

    Args:
        path: Path to the RFC 2822 email file.

    Returns:
        The parsed message.

    Raises:
        MaildirError: If the file can't be read (vanished, permissions).
    """
    try:
        raw_bytes = Path(path).read_bytes()
    except OSError as exc:
        raise MaildirError(f"Cannot read message {path}: {exc}") from exc

    # BytesParser with the default (compat32) policy handles
    # real-world malformed emails better than the "email" policy.
    parser = BytesParser(policy=policy.compat32)
    return parser.parsebytes(raw_bytes)


def decode_header_value(value: str) -> str:
    """Decode RFC 2047 encoded words, falling back to the raw value."""
    try:
        return str(make_header(decode_header(value)))
    except (ValueError, LookupError, UnicodeDecodeError):
        return value


def get_header(msg: MimeMessage, name: str) -> str:
    """Decoded value of a header, or "" when absent."""
    value = msg.get(name)
    if value is None:
        return ""
    return decode_header_value(str(value))


def _decode_payload(part: MimeMessage) -> str | None:
    payload = part.get_payload(decode=True)
    if not payload:
        return None
    charset = part.get_content_charset() or "utf-8"
    try:
        return payload.decode(charset, errors="replace")
    except LookupError:
        # Unknown charset name
        return payload.decode("utf-8", errors="replace")


def body_text(msg: MimeMessage) -> str:
    """Pick the displayable body of a message.

    The first text/plain part wins. Without one, the first text/html part
    is used with its tags stripped. Failing both, the whole payload.
    """
    body_plain = None
    body_html = None

    for part in msg.walk():
        # Skip multipart containers themselves
        if part.get_content_maintype() == "multipart":
            continue

        if "attachment" in str(part.get("Content-Disposition", "")):
            continue

        content_type = part.get_content_type()
        if content_type == "text/plain" and body_plain is None:
            body_plain = _decode_payload(part)
        elif content_type == "text/html" and body_html is None:
            body_html = _decode_payload(part)

    if body_plain:
        return body_plain

    if body_html:
        return strip_html(body_html)

    payload = msg.get_payload()
    if isinstance(payload, str):
        return payload
    return ""


def body_lines(msg: MimeMessage) -> list[str]:
    """The displayable body split into lines."""
    return body_text(msg).splitlines()


def strip_html(html: str) -> str:
    """Remove HTML tags from a string."""
    # Remove script and style content entirely
    html = re.sub(r"<script[^>]*>.*?</script>", "", html, flags=re.DOTALL | re.I)
    html = re.sub(r"<style[^>]*>.*?</style>", "", html, flags=re.DOTALL | re.I)
    # Line-breaking tags become newlines so the body keeps some shape
    html = re.sub(r"<(br|/p|/div|/h\d|/li)[^>]*>", "\n", html, flags=re.I)
    # Remove all remaining tags
    html = re.sub(r"<[^>]+>", "", html)
    # Decode common HTML entities
    html = html.replace("&nbsp;", " ")
    html = html.replace("&lt;", "<")
    html = html.replace("&gt;", ">")
    html = html.replace("&quot;", '"')
    html = html.replace("&amp;", "&")
    return html
