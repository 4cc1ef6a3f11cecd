"""
Records exchanged between extraction, the orchestrator, and the matcher.

All records are frozen dataclasses.  Sequences are stored as tuples so a
ProcessingResult cannot be mutated after construction.  ``to_dict`` /
``from_dict`` use the relay wire shape:

    question:  {"question", "type", "options", "index"}
    answer:    {"question", "answer", "type"}
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import CHOICE_KINDS, QUESTION_KINDS
from .text import normalize_options, normalize_text


@dataclass(frozen=True)
class Question:
    """One question extracted from the page."""

    text: str
    kind: str
    options: tuple[str, ...] | None = None
    sequence_index: int = 0

    def __post_init__(self) -> None:
        if self.kind not in QUESTION_KINDS:
            raise ValueError(
                f"Unknown question kind '{self.kind}'. "
                f"Expected one of: {sorted(QUESTION_KINDS)}"
            )
        if not isinstance(self.text, str) or not normalize_text(self.text):
            raise ValueError("Question text must be non-empty")
        if normalize_text(self.text) != self.text:
            raise ValueError(f"Question text must be normalized: {self.text!r}")

        if self.kind in CHOICE_KINDS:
            if not self.options:
                raise ValueError(
                    f"'{self.kind}' question requires at least one option: {self.text!r}"
                )
            options = tuple(self.options)
            if list(options) != normalize_options(options):
                raise ValueError(
                    f"Options must be normalized, non-empty and distinct: {options!r}"
                )
            object.__setattr__(self, "options", options)
        elif self.options is not None:
            raise ValueError(
                f"'{self.kind}' question must not carry options: {self.text!r}"
            )

    def to_dict(self) -> dict:
        return {
            "question": self.text,
            "type": self.kind,
            "options": list(self.options) if self.options is not None else None,
            "index": self.sequence_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        """
        Build a Question from a relay payload entry.

        Text and option labels are normalized the way extraction normalizes
        them, and duplicate labels are dropped.  An empty ``options`` list is
        read as absent, matching how extraction reports text questions.

        Raises:
            ValueError: The entry is not an object, lacks ``question`` or
                        ``type``, or violates a Question invariant.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Question entry must be an object, got {type(data).__name__}")

        text = data.get("question")
        kind = data.get("type")
        if not isinstance(text, str) or not isinstance(kind, str):
            raise ValueError(f"Question entry needs string 'question' and 'type': {data!r}")

        options = data.get("options") or None
        if options is not None:
            if not isinstance(options, (list, tuple)) or not all(
                isinstance(o, str) for o in options
            ):
                raise ValueError(f"'options' must be a list of strings: {options!r}")
            options = tuple(normalize_options(options))

        try:
            sequence_index = int(data.get("index", 0))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"'index' must be an integer: {data.get('index')!r}") from exc

        return cls(
            text=normalize_text(text),
            kind=kind,
            options=options,
            sequence_index=sequence_index,
        )


@dataclass(frozen=True)
class RawAnswer:
    """One question/answer pair as returned by the generation service."""

    question_text: str
    answer_value: str | tuple[str, ...]
    kind: str = ""

    @property
    def is_empty(self) -> bool:
        if isinstance(self.answer_value, tuple):
            return not any(v for v in self.answer_value)
        return not self.answer_value

    def to_dict(self) -> dict:
        value = self.answer_value
        return {
            "question": self.question_text,
            "answer": list(value) if isinstance(value, tuple) else value,
            "type": self.kind,
        }

    @classmethod
    def from_dict(cls, data: dict) -> RawAnswer:
        value = data.get("answer") or ""
        return cls(
            question_text=data.get("question") or "",
            answer_value=tuple(value) if isinstance(value, list) else value,
            kind=data.get("type") or "",
        )


@dataclass(frozen=True)
class BatchFailure:
    """A batch that exhausted its retries.  ``batch`` is the 1-based ordinal."""

    batch: int
    message: str

    def to_dict(self) -> dict:
        return {"batch": self.batch, "message": self.message}


@dataclass(frozen=True)
class BatchOutcome:
    """Terminal outcome of one batch: status is ``'success'`` or ``'failed'``."""

    batch: int
    status: str
    answers: tuple[RawAnswer, ...] = ()
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class ProcessingResult:
    """
    Aggregated outcome of one run.

    Attributes:
        answers: Answers of every successful batch, concatenated in batch order.
        failures: One entry per failed batch, or ``None`` when none failed.
        total_count: Number of questions submitted.
        cancelled: ``True`` if the run stopped at a batch boundary on request.
    """

    answers: tuple[RawAnswer, ...] = ()
    failures: tuple[BatchFailure, ...] | None = None
    total_count: int = 0
    cancelled: bool = False

    @property
    def processed_count(self) -> int:
        return len(self.answers)

    @classmethod
    def from_outcomes(
        cls,
        outcomes: list[BatchOutcome],
        total_count: int,
        cancelled: bool = False,
    ) -> ProcessingResult:
        answers: list[RawAnswer] = []
        failures: list[BatchFailure] = []
        for outcome in outcomes:
            if outcome.succeeded:
                answers.extend(outcome.answers)
            else:
                failures.append(BatchFailure(outcome.batch, outcome.message or ""))
        return cls(
            answers=tuple(answers),
            failures=tuple(failures) if failures else None,
            total_count=total_count,
            cancelled=cancelled,
        )

    def to_response(self) -> dict:
        return {
            "answers": [a.to_dict() for a in self.answers],
            "failures": (
                [f.to_dict() for f in self.failures] if self.failures else None
            ),
            "processed": self.processed_count,
            "total": self.total_count,
            "cancelled": self.cancelled,
        }
