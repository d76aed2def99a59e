import logging
import re
from typing import List, NamedTuple, Optional

logger = logging.getLogger(__name__)

PASV_PATTERN = re.compile(r'\((\d+),(\d+),(\d+),(\d+),(\d+),(\d+)\)')

# Last line of a reply: three digits and a space ("226 Transfer complete").
FINAL_LINE = re.compile(r'^(\d{3}) ')
# First line of a multi-line reply: three digits and a dash ("230-Welcome").
MULTILINE_START = re.compile(r'^(\d{3})-')

RESPONSE_TYPES = {
    '1': 'preliminary',
    '2': 'success',
    '3': 'missing_info',
    '4': 'error',
    '5': 'error'
}


class Reply:
    def __init__(self, code: str, message: str, type: str):
        self.code = code
        self.message = message
        self.type = type

    def is_error(self) -> bool:
        return self.type in ('error', 'unknown')

    def __repr__(self):
        return f"Reply(code={self.code!r}, type={self.type!r}, message={self.message!r})"


class DataEndpoint(NamedTuple):
    ip: str
    port: int


def decode_reply(data: bytes) -> Optional[str]:
    """Decode raw control-channel bytes; None on an empty read or bad UTF-8."""
    if not data:
        return None
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError:
        logger.warning(f"Discarding {len(data)} reply bytes that are not valid UTF-8")
        return None


def split_replies(text: str) -> List[str]:
    """
    Split one chunk of reply text into the replies it carries.

    A multi-line reply ("230-..." up to "230 ...") stays in one piece. Text
    after the last complete reply is kept as its own trailing unit.
    """
    replies = []
    current = []
    open_code = None
    for line in text.splitlines(keepends=True):
        current.append(line)
        if open_code is None:
            start = MULTILINE_START.match(line)
            if start and len(current) == 1:
                open_code = start.group(1)
                continue
            if FINAL_LINE.match(line):
                replies.append(''.join(current))
                current = []
        else:
            end = FINAL_LINE.match(line)
            if end and end.group(1) == open_code:
                replies.append(''.join(current))
                current = []
                open_code = None
    if current:
        replies.append(''.join(current))
    return replies


class Parser:
    def parse_data(self, data: str) -> Reply:
        data = data.strip()

        # Multi-line replies carry their code on the first line.
        code = data[:3]
        if not code.isdigit() or len(code) != 3:
            logger.error(f"Invalid FTP response format: {data!r}")
            return Reply("000", data, "unknown")

        message = data[4:] if len(data) > 3 and data[3] in ' -' else data[3:]
        reply = Reply(code, message, RESPONSE_TYPES.get(code[0], 'unknown'))
        logger.debug(f"Parsed response: code={code}, type={reply.type}, message={message[:50]}")
        return reply

    def parse_pasv_response(self, message: str) -> Optional[DataEndpoint]:
        """Extract the data endpoint from a PASV reply, or None if there is none."""
        match = PASV_PATTERN.search(message)
        if match is None:
            logger.error(f"Failed to parse PASV response: {message!r}")
            return None

        parts = [int(group) for group in match.groups()]
        if len(parts) != 6:
            return None
        if any(part > 255 for part in parts):
            logger.error(f"PASV response has out-of-range fields: {parts}")
            return None

        ip = '.'.join(str(part) for part in parts[:4])
        port = (parts[4] << 8) | parts[5]
        logger.debug(f"PASV parsed: {ip}:{port}")
        return DataEndpoint(ip, port)
