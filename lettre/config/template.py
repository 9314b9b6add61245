"""Default configuration template.

This template is written to ~/.config/lettre/config.toml
when running `lettre config init`.
"""

CONFIG_TEMPLATE = """\
# lettre configuration

[maildir]
# Directory whose subdirectories are Maildir folders
prefix = "~/Maildir"
# Folder filter: "all", "new" (folders with unread mail) or a path substring
limit = "all"
format = "[UNREAD/TOTAL] - PATH"

[index]
# Message filter: "all", "new" or a substring of the formatted line
limit = "all"
# Tokens: FLAGS FROM TO SUBJECT DATE YEAR MONTH DAY
format = "[FLAGS] DAY/MONTH/YEAR FROM - SUBJECT"
date_formats = [
    "%a, %d %b %Y %H:%M:%S %z",
    "%d %b %Y %H:%M:%S %z",
]
headers = ["Date", "From", "To", "Subject"]

[compose]
# from = "Your Name <you@example.com>"
# editor = "vim"
sendmail_path = "/usr/lib/sendmail -t"
sent_mail = "~/Maildir/sent-mail"
"""
