import logging
import random
from typing import Dict, Any, Callable, List, Optional

from errors import DecodeFailure, ShapeValidationFailure
from parsers import decode_array, decode_object, is_feedback, is_question_list, strip_fences
import prompts

LOG = logging.getLogger("coach")

FALLBACK_SCORE = 5

def generate_questions(dispatcher, company: Optional[str], role: Optional[str],
                       skills: Optional[List[str]] = None,
                       seed_source: Callable[[], float] = random.random) -> List[Dict[str, Any]]:
    request = prompts.questions_request(company, role, skills, seed_source=seed_source)
    raw = dispatcher.dispatch(request.text).unwrap()

    decoded = decode_array(raw)
    if not decoded.ok:
        raise DecodeFailure(decoded.reason, raw)
    if not is_question_list(decoded.value):
        raise ShapeValidationFailure("expected a non-empty list of questions", raw)
    return decoded.value

def _fallback_feedback(raw: str) -> Dict[str, Any]:
    return {"score": FALLBACK_SCORE, "feedback": strip_fences(raw), "strengths": [], "improvements": [], "tip": ""}

def score_answer(dispatcher, question: str, answer: str, company: Optional[str] = None,
                 question_number: Any = None, total_questions: Any = None) -> Dict[str, Any]:
    """AI feedback on one mock-interview answer.

    Unusable JSON degrades to a neutral score with the model's text as the
    feedback, so the interview can continue.
    """
    request = prompts.feedback_request(question, answer, company, question_number, total_questions)
    raw = dispatcher.dispatch(request.text).unwrap()

    decoded = decode_object(raw)
    if decoded.ok and is_feedback(decoded.value):
        return decoded.value
    LOG.warning("Interview feedback not structured, using raw text fallback")
    return _fallback_feedback(raw)
