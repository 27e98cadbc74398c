"""Pre-compiled regex patterns for the retirement records tools.

All patterns are compiled once at module import.

Usage:
    from utils.patterns import NIP_DIGITS, DATA_URI

    if NIP_DIGITS.match(nip):
        ...
"""

import re

# NIP (Nomor Induk Pegawai): ASCII digits only.  \d would also accept
# non-ASCII digits, which the civil-service registry never issues.
NIP_DIGITS = re.compile(r'^[0-9]+$')

# Base64 image data URI produced by encode_photo()
# Captures the MIME type (group 1) and the payload (group 2)
DATA_URI = re.compile(r'^data:([\w.+-]+/[\w.+-]+);base64,(.*)$', re.DOTALL)

# Characters that are unsafe in exported file names
UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
