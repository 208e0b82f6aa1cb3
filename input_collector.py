"""
Input collection for the studio: text, a single dropped/picked file,
and the idle/pending guard that keeps one generation in flight at a time.

The browser page mirrors these rules in JavaScript; the server applies
them again through one shared collector.
"""

import base64
import binascii
import logging
import threading
from dataclasses import dataclass
from enum import Enum

from system_prompt import CYCLING_WORDS, EXAMPLE_PROMPT, REJECTION_NOTICE

logger = logging.getLogger(__name__)

ACCEPTED_MIME_PREFIX = "image/"
ACCEPTED_MIME_TYPES = {"application/pdf"}


def is_accepted_mime_type(mime_type):
    if not mime_type:
        return False
    return mime_type.startswith(ACCEPTED_MIME_PREFIX) or mime_type in ACCEPTED_MIME_TYPES


class InvalidFileData(ValueError):
    pass


@dataclass
class UploadedFile:
    data: bytes
    mime_type: str
    name: str | None = None

    @classmethod
    def from_data_url(cls, data_url, name=None):
        """Parse ``data:<mime>;base64,<payload>`` as produced by FileReader.readAsDataURL."""
        try:
            header, b64 = data_url.split(",", 1)
            if not header.startswith("data:") or not header.endswith(";base64"):
                raise InvalidFileData("Expected a base64 data URL")
            mime_type = header[len("data:"):-len(";base64")]
            data = base64.b64decode(b64, validate=True)
        except (AttributeError, ValueError, binascii.Error) as e:
            raise InvalidFileData(str(e)) from e
        return cls(data=data, mime_type=mime_type, name=name)

    def to_base64(self):
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_url(self):
        return f"data:{self.mime_type};base64,{self.to_base64()}"


class CollectorState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class SubmissionStatus(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"  # wrong file type, notice shown
    BLOCKED = "blocked"    # another generation in flight
    IGNORED = "ignored"    # nothing to submit


@dataclass
class Submission:
    status: SubmissionStatus
    html: str | None = None


class InputCollector:
    """
    Holds the prompt text, drag state and in-flight flag.

    The server drives ``submit_text``/``submit_file``; the key, drag and
    example-prompt methods are the reference model the page script mirrors.

    ``on_generate(prompt, file)`` is called synchronously with the text (may
    be empty) and an ``UploadedFile`` or None; its return value is handed
    back in ``Submission.html``. ``notify(message)`` receives user-facing
    notices such as a rejected file type.
    """

    def __init__(self, on_generate, notify=None):
        self.on_generate = on_generate
        self.notify = notify or (lambda message: logger.warning(message))
        self.prompt = ""
        self.is_dragging = False
        self.state = CollectorState.IDLE
        self._lock = threading.Lock()

    @property
    def is_generating(self):
        return self.state is CollectorState.PENDING

    def set_prompt(self, text):
        if not self.is_generating:
            self.prompt = text

    def use_example_prompt(self):
        self.set_prompt(EXAMPLE_PROMPT)

    def submit_text(self, text=None):
        text = self.prompt if text is None else text
        if not text.strip():
            return Submission(SubmissionStatus.IGNORED)
        return self._run(text, None)

    def handle_key(self, key, shift=False):
        if key == "Enter" and not shift:
            return self.submit_text()
        return None

    def submit_file(self, file, text=None):
        if self.is_generating:
            return Submission(SubmissionStatus.BLOCKED)
        if not is_accepted_mime_type(file.mime_type):
            self.notify(REJECTION_NOTICE)
            return Submission(SubmissionStatus.REJECTED)
        return self._run(self.prompt if text is None else text, file)

    def drag_over(self):
        if not self.is_generating:
            self.is_dragging = True

    def drag_leave(self):
        self.is_dragging = False

    def drop(self, file):
        if self.is_generating:
            return Submission(SubmissionStatus.BLOCKED)
        self.is_dragging = False
        return self.submit_file(file)

    def _begin(self):
        with self._lock:
            if self.state is CollectorState.PENDING:
                return False
            self.state = CollectorState.PENDING
            return True

    def _run(self, prompt, file):
        if not self._begin():
            return Submission(SubmissionStatus.BLOCKED)
        try:
            html = self.on_generate(prompt, file)
        finally:
            self.state = CollectorState.IDLE
        return Submission(SubmissionStatus.ACCEPTED, html=html)


class Phase(str, Enum):
    VISIBLE = "visible"
    TRANSITIONING = "transitioning"


class CyclingText:
    """
    Word rotation behind the "Bring ___ to life" headline.

    Reference model for the page script: the server hands ``to_dict()`` to the
    browser, whose setInterval/setTimeout pair performs the same
    start_transition/complete_transition steps that ``at()`` computes.
    """

    def __init__(self, words=None, interval_ms=3000, fade_ms=500):
        self.words = list(words or CYCLING_WORDS)
        self.interval_ms = interval_ms
        self.fade_ms = fade_ms
        self.index = 0
        self.phase = Phase.VISIBLE

    @property
    def current_word(self):
        return self.words[self.index]

    def start_transition(self):
        self.phase = Phase.TRANSITIONING

    def complete_transition(self):
        self.index = (self.index + 1) % len(self.words)
        self.phase = Phase.VISIBLE

    def at(self, elapsed_ms):
        """Word and phase shown ``elapsed_ms`` after the rotation started at index 0."""
        ticks, into_tick = divmod(elapsed_ms, self.interval_ms)
        # Each tick fades out for fade_ms, then swaps the word in.
        if ticks and into_tick < self.fade_ms:
            return self.words[(ticks - 1) % len(self.words)], Phase.TRANSITIONING
        return self.words[ticks % len(self.words)], Phase.VISIBLE

    def to_dict(self):
        return {
            "words": self.words,
            "interval_ms": self.interval_ms,
            "fade_ms": self.fade_ms,
        }
