# reviewer.py
import logging
from typing import Dict, Any, List, Optional

from errors import DecodeFailure, ShapeValidationFailure
from parsers import decode_object, is_analysis, strip_fences
import prompts

LOG = logging.getLogger("coach")

RAW_LOG_CHARS = 500

def analyze_readiness(dispatcher, resume_text: str, skills: Optional[List[str]], company: str) -> Dict[str, Any]:
    """Skill-gap analysis for one target company.

    Returns the decoded object: readinessScore, strong/weak/missing skills and
    a six-month roadmap. Raises DecodeFailure / ShapeValidationFailure when
    the model text cannot be used.
    """
    request = prompts.analysis_request(resume_text, skills, company)
    raw = dispatcher.dispatch(request.text).unwrap()

    decoded = decode_object(raw)
    if not decoded.ok:
        LOG.error("Failed to extract JSON from analysis. Raw (first %d chars): %s", RAW_LOG_CHARS, raw[:RAW_LOG_CHARS])
        raise DecodeFailure(decoded.reason, raw)
    if not is_analysis(decoded.value):
        LOG.error("Analysis JSON missing readinessScore/roadmap. Raw (first %d chars): %s", RAW_LOG_CHARS, raw[:RAW_LOG_CHARS])
        raise ShapeValidationFailure("analysis needs numeric readinessScore and roadmap list", raw)
    return decoded.value

def rewrite_resume(dispatcher, resume_text: str) -> str:
    raw = dispatcher.dispatch(prompts.rewrite_request(resume_text).text).unwrap()
    return strip_fences(raw)

def generate_cover_letter(dispatcher, job_title: str, company: str,
                          key_points: Optional[str] = None, resume_text: Optional[str] = None) -> str:
    request = prompts.cover_letter_request(job_title, company, key_points, resume_text)
    return strip_fences(dispatcher.dispatch(request.text).unwrap())
