"""
Question bank loading.

The bank is read once at startup from a delimited text file where every
record looks like ``correct;question text;option 1;option 2;...`` with a
1-based index of the correct option in the first field. Rows that do not
describe a usable question are logged and skipped; only an unreadable
file aborts the load.
"""
from __future__ import annotations

import codecs
import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence, Union


logger = logging.getLogger("quizweb.question_bank")

MIN_RECORD_FIELDS = 3


class LoadError(Exception):
    """The question source could not be opened or read."""


class MalformedRecord(ValueError):
    """A single record does not describe a valid question."""


@dataclass(frozen=True)
class Question:
    correct_index: int  # 1-based
    text: str
    options: tuple[str, ...]

    def option_text(self, index: int) -> str | None:
        """Return the text of a 1-based option, or None when out of range."""
        if 1 <= index <= len(self.options):
            return self.options[index - 1]
        return None

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_index - 1]


@dataclass(frozen=True)
class QuestionBank:
    """Read-only ordered collection of questions shared by every session."""

    questions: tuple[Question, ...]
    source: Path | None = None

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions)

    def __getitem__(self, index: int) -> Question:
        return self.questions[index]


def parse_record(fields: Sequence[str]) -> Question:
    """Build a Question from one parsed record or raise MalformedRecord."""
    values = [value.strip() for value in fields]
    # A trailing delimiter yields empty fields that are not options.
    while values and not values[-1]:
        values.pop()

    if len(values) < MIN_RECORD_FIELDS:
        raise MalformedRecord(
            f"expected at least {MIN_RECORD_FIELDS} fields, got {len(values)}"
        )

    raw_correct, text, options = values[0], values[1], tuple(values[2:])
    try:
        correct_index = int(raw_correct)
    except ValueError as exc:
        raise MalformedRecord(f"correct option {raw_correct!r} is not a number") from exc

    if not text:
        raise MalformedRecord("question text is empty")
    if not all(options):
        raise MalformedRecord("question has an empty option")
    if not 1 <= correct_index <= len(options):
        raise MalformedRecord(
            f"correct option {correct_index} outside 1..{len(options)}"
        )
    return Question(correct_index=correct_index, text=text, options=options)


def _split_line(line: bytes, delimiter: str) -> list[str]:
    """Decode one physical line and split it into fields."""
    try:
        text = line.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedRecord(f"not valid UTF-8 at byte {exc.start}") from exc
    try:
        return next(csv.reader([text], delimiter=delimiter, strict=False), [])
    except csv.Error as exc:
        raise MalformedRecord(str(exc)) from exc


def load_question_bank(path: Union[str, Path], delimiter: str = ";") -> QuestionBank:
    """
    Load every valid question from ``path``.

    Each line is decoded and parsed on its own, so an undecodable or
    unparsable line costs only that question.

    Args:
        path: Location of the delimited question file.
        delimiter: Field separator, ``;`` by default.

    Returns:
        The immutable bank, in file order.

    Raises:
        LoadError: If the file cannot be opened or read.
    """
    source = Path(path)
    try:
        raw = source.read_bytes()
    except OSError as exc:
        raise LoadError(f"Cannot read question file {source}: {exc}") from exc

    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]

    questions: list[Question] = []
    for line_number, line in enumerate(raw.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            questions.append(parse_record(_split_line(line, delimiter)))
        except MalformedRecord as exc:
            logger.warning("Skipping %s line %d: %s", source, line_number, exc)

    logger.info("Loaded %d questions from %s", len(questions), source)
    return QuestionBank(questions=tuple(questions), source=source)
