"""
Client side of the compressor: select a file, compress it on the server,
compare sizes and save the result.

CompressionSession is an explicit state machine so that states such as
"compressing with no file" cannot exist. Every compress request carries a
ticket; answers for a ticket that no longer matches the current selection
are dropped instead of overwriting newer state.
"""

import argparse
import json
import logging
import mimetypes
import os
import threading
from dataclasses import dataclass
from enum import Enum

import requests

from compression import (
    COMPRESSED_SIZE_HEADER,
    DEFAULT_QUALITY,
    ORIGINAL_SIZE_HEADER,
    UploadRequest,
    ValidationError,
    validate,
)

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:5000/api/compress"
GENERIC_ERROR = "Failed to compress image."


class SessionState(Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    COMPRESSING = "compressing"
    COMPARED = "compared"
    ERROR = "error"


class IllegalTransition(Exception):
    """Operation not allowed in the session's current state"""


@dataclass(frozen=True)
class SelectedFile:
    data: bytes
    filename: str
    mimetype: str

    @property
    def size(self):
        return len(self.data)


@dataclass(frozen=True)
class Ticket:
    generation: int
    file: SelectedFile
    quality: int


@dataclass(frozen=True)
class Stats:
    original: int
    compressed: int
    saved: float  # percent, 0 when the output grew


def format_bytes(size, decimals=2):
    """Human readable byte count: 1536 -> '1.5 KB'"""
    if not size:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, max(decimals, 0)):g} {units[i]}"


class CompressionSession:
    def __init__(self, url=DEFAULT_URL, http=None):
        self.url = url
        self.http = http or requests.Session()
        self.state = SessionState.EMPTY
        self.file = None
        self.result = None
        self.stats = None
        self.error = None
        self._generation = 0
        self._lock = threading.Lock()

    def _require(self, *states):
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise IllegalTransition(f"state is {self.state.value}, expected one of: {allowed}")

    def select(self, data, filename, mimetype=None):
        """
        Load a new file after checking it locally.

        Returns True when the file was accepted. A rejected file leaves the
        previous selection and state in place and sets `error`.
        """
        mimetype = mimetype or mimetypes.guess_type(filename)[0]
        try:
            validate(UploadRequest(data=data, declared_type=mimetype))
        except ValidationError as e:
            with self._lock:
                self.error = e.message
            return False

        with self._lock:
            # an in-flight answer for the old file must not land on this one
            self._generation += 1
            self.file = SelectedFile(data=data, filename=filename, mimetype=mimetype)
            self.result = None
            self.stats = None
            self.error = None
            self.state = SessionState.LOADED
        return True

    def select_path(self, path, mimetype=None):
        with open(path, "rb") as f:
            data = f.read()
        return self.select(data, os.path.basename(path), mimetype)

    def cancel(self):
        with self._lock:
            self._generation += 1
            self.file = None
            self.result = None
            self.stats = None
            self.error = None
            self.state = SessionState.EMPTY

    def begin_compress(self, quality=DEFAULT_QUALITY):
        with self._lock:
            self._require(SessionState.LOADED, SessionState.COMPARED, SessionState.ERROR)
            self.error = None
            self.state = SessionState.COMPRESSING
            return Ticket(generation=self._generation, file=self.file, quality=quality)

    def _is_current(self, ticket):
        return ticket.generation == self._generation and self.state is SessionState.COMPRESSING

    def complete(self, ticket, status, headers, body):
        """Apply a server answer; returns False when the ticket is stale"""
        with self._lock:
            if not self._is_current(ticket):
                logger.debug("Dropping stale compression result")
                return False

            if status != 200:
                self.error = _error_message(body) or GENERIC_ERROR
                self.state = SessionState.ERROR
                return True

            original = _size_header(headers, ORIGINAL_SIZE_HEADER, ticket.file.size)
            compressed = _size_header(headers, COMPRESSED_SIZE_HEADER, len(body))
            saved = (original - compressed) / original * 100 if original else 0.0
            self.result = body
            self.stats = Stats(
                original=original,
                compressed=compressed,
                saved=round(saved, 1) if saved > 0 else 0,
            )
            self.state = SessionState.COMPARED
            return True

    def fail(self, ticket, message):
        with self._lock:
            if not self._is_current(ticket):
                return False
            self.error = message
            self.state = SessionState.ERROR
            return True

    def dismiss_error(self):
        with self._lock:
            self._require(SessionState.ERROR)
            self.error = None
            self.state = SessionState.LOADED

    def compress(self, quality=DEFAULT_QUALITY, timeout=60):
        ticket = self.begin_compress(quality)
        files = {"file": (ticket.file.filename, ticket.file.data, ticket.file.mimetype)}
        try:
            response = self.http.post(
                self.url,
                files=files,
                data={"quality": str(quality)},
                timeout=timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Compression request failed: {e}")
            self.fail(ticket, str(e) or GENERIC_ERROR)
            return self.state
        except Exception:
            logger.exception("Compression request failed")
            self.fail(ticket, GENERIC_ERROR)
            return self.state

        try:
            self.complete(ticket, response.status_code, response.headers, response.content)
        except Exception:
            logger.exception("Could not apply compression result")
            self.fail(ticket, GENERIC_ERROR)
        return self.state

    def save(self, directory="."):
        """Write the compressed image as compressed_<filename>"""
        with self._lock:
            self._require(SessionState.COMPARED)
            path = os.path.join(directory, f"compressed_{self.file.filename}")
            body = self.result
        with open(path, "wb") as f:
            f.write(body)
        return path


def _size_header(headers, name, fallback):
    """Byte count from a size header, or fallback when it is missing or malformed"""
    try:
        return int(headers.get(name, fallback))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed {name} header")
        return fallback


def _error_message(body):
    try:
        return json.loads(body).get("error")
    except (TypeError, ValueError, AttributeError):
        return None


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compress an image with the compressor service")
    parser.add_argument("image", help="JPG, PNG or WEBP file")
    parser.add_argument("--quality", type=int, default=DEFAULT_QUALITY)
    parser.add_argument("--url", default=DEFAULT_URL)
    parser.add_argument("--out", default=".", help="directory for the compressed file")
    args = parser.parse_args(argv)

    session = CompressionSession(url=args.url)
    if not session.select_path(args.image):
        print(f"Error: {session.error}")
        return 1

    state = session.compress(args.quality)
    if state is not SessionState.COMPARED:
        print(f"Error: {session.error}")
        return 1

    stats = session.stats
    print(f"Original:   {format_bytes(stats.original)}")
    print(f"Compressed: {format_bytes(stats.compressed)}")
    print(f"Saved:      {stats.saved}%")
    print(f"Written to {session.save(args.out)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
