"""Service layer for the quiz server."""
from .scoring import QuestionOutcome, ScoredResult, format_duration, score
from .outcome_log import OutcomeLog, OutcomeLogEntry

__all__ = [
	"QuestionOutcome", "ScoredResult", "format_duration", "score",
	"OutcomeLog", "OutcomeLogEntry",
]
