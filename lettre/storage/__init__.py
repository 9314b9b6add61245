"""Maildir storage: flag encoding in filenames and folder scanning."""

from .flags import add_flag, decode, display_flags, effective_flags, encode, remove_flag
from .maildir import (
    MaildirFolder,
    copy_message,
    deliver_message,
    ensure_folder,
    folder_key,
    is_maildir,
    message_in,
    scan_folders,
)

__all__ = [
    "decode",
    "encode",
    "effective_flags",
    "display_flags",
    "add_flag",
    "remove_flag",
    "MaildirFolder",
    "scan_folders",
    "is_maildir",
    "ensure_folder",
    "deliver_message",
    "copy_message",
    "message_in",
    "folder_key",
]
