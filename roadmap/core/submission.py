"""Submitting a phase's tasks to an administrator.

The core validates the draft (notes and/or a PDF attachment), hands a
payload to an injected ``Submitter`` and turns its completion into a
``SubmissionOutcome``. How the payload travels is up to the submitter.

Only one submission per phase may be in flight at a time. The caller
enforces this by disabling its submit action until the outcome arrives;
``submit_phase`` keeps no in-flight state of its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Tuple, Union

if TYPE_CHECKING:
    from roadmap.core.phases import Phase

logger = logging.getLogger(__name__)

OUTCOME_LIFETIME_MS = 3000
PDF_MEDIA_TYPE = "application/pdf"
PDF_SUFFIX = ".pdf"

MISSING_INPUT_MESSAGE = "Please add notes or upload a file before submitting."
INVALID_FILE_MESSAGE = "Please upload a PDF file only."


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SubmissionOutcome:
    """User-facing result of an action, dismissed after ``lifetime_ms``."""

    kind: OutcomeKind
    message: str
    phase_id: Optional[str] = None
    lifetime_ms: int = OUTCOME_LIFETIME_MS

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @classmethod
    def success(cls, message: str, phase_id: Optional[str] = None) -> SubmissionOutcome:
        return cls(OutcomeKind.SUCCESS, message, phase_id)

    @classmethod
    def error(cls, message: str, phase_id: Optional[str] = None) -> SubmissionOutcome:
        return cls(OutcomeKind.ERROR, message, phase_id)


def success_message(title: str) -> str:
    return f"All tasks for {title} submitted successfully!"


def failure_message(title: str, reason: str) -> str:
    return f"Submission for {title} failed: {reason}"


def empty_phase_message(title: str) -> str:
    return f"{title} has no tasks to submit."


@dataclass(frozen=True)
class Attachment:
    """A file picked for upload. Only its name and declared type are inspected."""

    name: str
    media_type: Optional[str] = None
    path: Optional[Path] = None

    @classmethod
    def from_path(cls, path: Union[str, Path], media_type: Optional[str] = None) -> Attachment:
        p = Path(path)
        return cls(name=p.name, media_type=media_type, path=p)


def is_pdf(attachment: Optional[Attachment]) -> bool:
    """Accept a declared PDF media type or a ``.pdf`` name (any case)."""
    if attachment is None:
        return False
    media_type = (attachment.media_type or "").strip().lower()
    if media_type == PDF_MEDIA_TYPE:
        return True
    return str(attachment.name or "").strip().lower().endswith(PDF_SUFFIX)


@dataclass(frozen=True)
class SubmissionDraft:
    """Notes and optional attachment collected for one phase."""

    notes: str = ""
    attachment: Optional[Attachment] = None

    @property
    def has_notes(self) -> bool:
        return bool((self.notes or "").strip())

    @property
    def can_submit(self) -> bool:
        return self.has_notes or self.attachment is not None

    def with_notes(self, notes: str) -> SubmissionDraft:
        return replace(self, notes=notes or "")

    def with_attachment(self, candidate: Optional[Attachment]) -> Tuple[SubmissionDraft, Optional[SubmissionOutcome]]:
        """Attach *candidate* if it is a PDF.

        A rejected candidate is discarded and reported as an error outcome;
        an attachment accepted earlier stays in place.
        """
        if candidate is None:
            return self, None
        if not is_pdf(candidate):
            logger.info("Rejected non-PDF attachment %r (%s)", candidate.name, candidate.media_type)
            return self, SubmissionOutcome.error(INVALID_FILE_MESSAGE)
        return replace(self, attachment=candidate), None

    def without_attachment(self) -> SubmissionDraft:
        return replace(self, attachment=None)


@dataclass(frozen=True)
class SubmissionPayload:
    phase_id: str
    phase_title: str
    notes: str
    attachment: Optional[Attachment] = None


# Completion receives None on success, or a failure reason.
Completion = Callable[[Optional[str]], None]
Submitter = Callable[[SubmissionPayload, Completion], None]
OutcomeHandler = Callable[[SubmissionOutcome], None]


def validate_submission(phase: Phase, draft: SubmissionDraft) -> Optional[SubmissionOutcome]:
    """Return an error outcome if *draft* cannot be sent for *phase*."""
    if not phase.tasks:
        return SubmissionOutcome.error(empty_phase_message(phase.title), phase.id)
    if not draft.can_submit:
        return SubmissionOutcome.error(MISSING_INPUT_MESSAGE, phase.id)
    if draft.attachment is not None and not is_pdf(draft.attachment):
        return SubmissionOutcome.error(INVALID_FILE_MESSAGE, phase.id)
    return None


def submit_phase(
    phase: Phase,
    draft: SubmissionDraft,
    submitter: Submitter,
    on_outcome: OutcomeHandler,
) -> Optional[SubmissionOutcome]:
    """Validate *draft* and hand it to *submitter*.

    Validation errors are delivered to *on_outcome* straight away and also
    returned; the submitter is not called. Otherwise returns None and
    *on_outcome* fires once the submitter completes. Repeated completions
    are ignored.
    """
    rejected = validate_submission(phase, draft)
    if rejected is not None:
        logger.info("Submission for %s rejected: %s", phase.id, rejected.message)
        on_outcome(rejected)
        return rejected

    payload = SubmissionPayload(
        phase_id=phase.id,
        phase_title=phase.title,
        notes=(draft.notes or "").strip(),
        attachment=draft.attachment,
    )
    done = False

    def _complete(error: Optional[str] = None) -> None:
        nonlocal done
        if done:
            logger.debug("Duplicate completion for %s ignored", phase.id)
            return
        done = True
        if error is None:
            logger.info("Submission for %s completed", phase.id)
            on_outcome(SubmissionOutcome.success(success_message(phase.title), phase.id))
        else:
            logger.warning("Submission for %s failed: %s", phase.id, error)
            on_outcome(SubmissionOutcome.error(failure_message(phase.title, error), phase.id))

    logger.info("Submitting %s (notes=%d chars, attachment=%s)", phase.id, len(payload.notes),
                payload.attachment.name if payload.attachment else None)
    try:
        submitter(payload, _complete)
    except Exception as e:
        _complete(str(e) or e.__class__.__name__)
    return None
