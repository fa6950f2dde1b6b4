"""Tests for roadmap.core.submission – drafts, attachment sniffing and the submit flow."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pytest

from roadmap.core.phases import Phase, Task
from roadmap.core.submission import (
    INVALID_FILE_MESSAGE,
    MISSING_INPUT_MESSAGE,
    OUTCOME_LIFETIME_MS,
    Attachment,
    Completion,
    OutcomeKind,
    SubmissionDraft,
    SubmissionOutcome,
    SubmissionPayload,
    is_pdf,
    submit_phase,
    validate_submission,
)


class FakeSubmitter:
    """Records payloads and lets the test decide when to complete."""

    def __init__(self) -> None:
        self.payloads: List[SubmissionPayload] = []
        self.completions: List[Completion] = []

    def __call__(self, payload: SubmissionPayload, complete: Completion) -> None:
        self.payloads.append(payload)
        self.completions.append(complete)

    def complete(self, error: Optional[str] = None) -> None:
        self.completions[-1](error)


@pytest.fixture()
def phase() -> Phase:
    return Phase(
        id="phase-1",
        title="Phase 1",
        description="Foundation & Setup",
        tasks=(Task("t1", "Foundation Setup", level=3),),
    )


@pytest.fixture()
def submitter() -> FakeSubmitter:
    return FakeSubmitter()


@pytest.fixture()
def outcomes() -> List[SubmissionOutcome]:
    return []


# ---------------------------------------------------------------------------
# SubmissionOutcome
# ---------------------------------------------------------------------------

class TestSubmissionOutcome:
    def test_success(self):
        outcome = SubmissionOutcome.success("done", "p")
        assert outcome.kind is OutcomeKind.SUCCESS
        assert outcome.is_success
        assert outcome.phase_id == "p"

    def test_error(self):
        outcome = SubmissionOutcome.error("nope")
        assert outcome.kind is OutcomeKind.ERROR
        assert not outcome.is_success
        assert outcome.phase_id is None

    def test_default_lifetime(self):
        assert SubmissionOutcome.error("x").lifetime_ms == OUTCOME_LIFETIME_MS == 3000

    def test_kind_values(self):
        assert OutcomeKind.SUCCESS.value == "success"
        assert OutcomeKind.ERROR.value == "error"


# ---------------------------------------------------------------------------
# Attachment sniffing
# ---------------------------------------------------------------------------

class TestIsPdf:
    def test_declared_media_type(self):
        assert is_pdf(Attachment(name="scan", media_type="application/pdf"))

    def test_media_type_case_insensitive(self):
        assert is_pdf(Attachment(name="scan", media_type=" Application/PDF "))

    def test_uppercase_extension_without_media_type(self):
        assert is_pdf(Attachment(name="report.PDF"))

    def test_extension_wins_over_other_media_type(self):
        assert is_pdf(Attachment(name="report.pdf", media_type="application/octet-stream"))

    @pytest.mark.parametrize("name", ["report.docx", "pdf", "report.pdf.exe", "report", ""])
    def test_rejected(self, name):
        assert not is_pdf(Attachment(name=name, media_type="text/plain"))

    def test_none(self):
        assert not is_pdf(None)

    def test_from_path(self):
        attachment = Attachment.from_path(Path("/tmp/docs/Report.Pdf"))
        assert attachment.name == "Report.Pdf"
        assert attachment.path == Path("/tmp/docs/Report.Pdf")
        assert is_pdf(attachment)


# ---------------------------------------------------------------------------
# SubmissionDraft
# ---------------------------------------------------------------------------

class TestSubmissionDraft:
    def test_empty_cannot_submit(self):
        assert not SubmissionDraft().can_submit

    def test_whitespace_notes_cannot_submit(self):
        assert not SubmissionDraft(notes="   \n\t").can_submit

    def test_notes_can_submit(self):
        assert SubmissionDraft().with_notes("ok").can_submit

    def test_attachment_can_submit(self):
        draft, outcome = SubmissionDraft().with_attachment(Attachment(name="a.pdf"))
        assert outcome is None
        assert draft.can_submit

    def test_invalid_attachment_discarded(self):
        draft, outcome = SubmissionDraft().with_attachment(Attachment(name="a.png", media_type="image/png"))
        assert draft.attachment is None
        assert outcome is not None
        assert outcome.kind is OutcomeKind.ERROR
        assert outcome.message == INVALID_FILE_MESSAGE

    def test_invalid_attachment_keeps_earlier_pdf(self):
        first, _ = SubmissionDraft().with_attachment(Attachment(name="a.pdf"))
        second, outcome = first.with_attachment(Attachment(name="b.txt"))
        assert outcome is not None
        assert second.attachment == Attachment(name="a.pdf")

    def test_none_candidate(self):
        draft = SubmissionDraft(notes="x")
        assert draft.with_attachment(None) == (draft, None)

    def test_without_attachment(self):
        draft, _ = SubmissionDraft().with_attachment(Attachment(name="a.pdf"))
        assert draft.without_attachment().attachment is None

    def test_immutable_updates(self):
        draft = SubmissionDraft()
        draft.with_notes("hello")
        assert draft.notes == ""


# ---------------------------------------------------------------------------
# validate_submission
# ---------------------------------------------------------------------------

class TestValidateSubmission:
    def test_missing_input(self, phase: Phase):
        outcome = validate_submission(phase, SubmissionDraft())
        assert outcome == SubmissionOutcome.error(MISSING_INPUT_MESSAGE, "phase-1")

    def test_missing_input_message(self):
        assert "add notes or upload a file before submitting" in MISSING_INPUT_MESSAGE

    def test_notes_ok(self, phase: Phase):
        assert validate_submission(phase, SubmissionDraft(notes="ok")) is None

    def test_non_pdf_in_draft(self, phase: Phase):
        outcome = validate_submission(phase, SubmissionDraft(attachment=Attachment(name="a.txt")))
        assert outcome is not None
        assert outcome.message == INVALID_FILE_MESSAGE

    def test_phase_without_tasks(self):
        empty = Phase(id="p", title="Empty")
        outcome = validate_submission(empty, SubmissionDraft(notes="ok"))
        assert outcome is not None
        assert outcome.message == "Empty has no tasks to submit."


# ---------------------------------------------------------------------------
# submit_phase
# ---------------------------------------------------------------------------

class TestSubmitPhase:
    def test_empty_draft_does_not_call_submitter(self, phase, submitter, outcomes):
        result = submit_phase(phase, SubmissionDraft(), submitter, outcomes.append)
        assert submitter.payloads == []
        assert result is not None
        assert outcomes == [result]
        assert result.kind is OutcomeKind.ERROR
        assert result.message == MISSING_INPUT_MESSAGE

    def test_notes_success(self, phase, submitter, outcomes):
        result = submit_phase(phase, SubmissionDraft(notes="ok"), submitter, outcomes.append)
        assert result is None
        assert outcomes == []
        submitter.complete()
        assert len(outcomes) == 1
        assert outcomes[0].is_success
        assert outcomes[0].message == "All tasks for Phase 1 submitted successfully!"
        assert outcomes[0].phase_id == "phase-1"

    def test_payload(self, phase, submitter, outcomes):
        draft, _ = SubmissionDraft(notes="  see attached  ").with_attachment(Attachment(name="report.PDF"))
        submit_phase(phase, draft, submitter, outcomes.append)
        payload = submitter.payloads[0]
        assert payload.phase_id == "phase-1"
        assert payload.phase_title == "Phase 1"
        assert payload.notes == "see attached"
        assert payload.attachment == Attachment(name="report.PDF")

    def test_file_only(self, phase, submitter, outcomes):
        draft, _ = SubmissionDraft().with_attachment(Attachment(name="report.PDF"))
        submit_phase(phase, draft, submitter, outcomes.append)
        submitter.complete()
        assert outcomes[0].is_success

    def test_failure_reported(self, phase, submitter, outcomes):
        submit_phase(phase, SubmissionDraft(notes="ok"), submitter, outcomes.append)
        submitter.complete("server unavailable")
        assert outcomes[0].kind is OutcomeKind.ERROR
        assert outcomes[0].message == "Submission for Phase 1 failed: server unavailable"

    def test_duplicate_completion_ignored(self, phase, submitter, outcomes):
        submit_phase(phase, SubmissionDraft(notes="ok"), submitter, outcomes.append)
        submitter.complete()
        submitter.complete("late error")
        assert len(outcomes) == 1
        assert outcomes[0].is_success

    def test_raising_submitter(self, phase, outcomes):
        def broken(payload, complete):
            raise ConnectionError("offline")

        result = submit_phase(phase, SubmissionDraft(notes="ok"), broken, outcomes.append)
        assert result is None
        assert len(outcomes) == 1
        assert outcomes[0].message == "Submission for Phase 1 failed: offline"

    def test_raising_submitter_without_message(self, phase, outcomes):
        def broken(payload, complete):
            raise TimeoutError()

        submit_phase(phase, SubmissionDraft(notes="ok"), broken, outcomes.append)
        assert outcomes[0].message.endswith("TimeoutError")

    def test_synchronous_submitter(self, phase, outcomes):
        submit_phase(phase, SubmissionDraft(notes="ok"), lambda p, done: done(None), outcomes.append)
        assert [o.is_success for o in outcomes] == [True]

    def test_each_call_independent(self, phase, submitter, outcomes):
        submit_phase(phase, SubmissionDraft(notes="a"), submitter, outcomes.append)
        submit_phase(phase, SubmissionDraft(notes="b"), submitter, outcomes.append)
        submitter.completions[0](None)
        submitter.completions[1](None)
        assert len(outcomes) == 2
