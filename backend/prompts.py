"""
Prompt templates for every coaching task.

Templates use `$name` placeholders (string.Template) so the JSON examples
inside them can keep their braces as-is.
"""

from __future__ import annotations
import json
import random
from dataclasses import dataclass, field
from enum import Enum
from string import Template
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional


class TaskKind(str, Enum):
    ANALYSIS = "analysis"
    QUESTIONS = "questions"
    REWRITE = "rewrite"
    FEEDBACK = "feedback"
    COVER_LETTER = "cover_letter"
    CHAT = "chat"


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


@dataclass(frozen=True)
class PromptRequest:
    task_kind: TaskKind
    instructions: str
    context_fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "context_fields", MappingProxyType(dict(self.context_fields)))

    @property
    def text(self) -> str:
        rendered = {k: _render_value(v) for k, v in self.context_fields.items()}
        return Template(self.instructions).substitute(rendered)


ANALYSIS_PROMPT = """You are a career coach. Analyze this candidate for $company.

Resume: $resume_text
Skills: $skills
Target: $company

Return ONLY valid JSON (no markdown, no backticks):
{
  "readinessScore": <0-100>,
  "targetCompany": "$company",
  "strongSkills": ["skill1", "skill2"],
  "weakSkills": ["skill1", "skill2"],
  "missingSkills": ["skill1"],
  "roadmap": [
    {"month": 1, "title": "...", "description": "..."},
    {"month": 2, "title": "...", "description": "..."},
    {"month": 3, "title": "...", "description": "..."},
    {"month": 4, "title": "...", "description": "..."},
    {"month": 5, "title": "...", "description": "..."},
    {"month": 6, "title": "...", "description": "..."}
  ]
}"""

QUESTIONS_PROMPT = """You are a senior technical interviewer at $company.

TASK: Generate 6 realistic interview questions that $company would actually ask for a $role role.

Candidate's skills: $skills
Random Seed: $seed (Make this set new and different from standard or previous questions)

Include a mix of:
- 1 behavioral question
- 2 technical/coding questions
- 1 system design question
- 1 problem-solving question
- 1 company-specific/culture-fit question

Make them specific to $company's known interview style and the candidate's skill set. Avoid generic questions like "Tell me about yourself".

RESPONSE FORMAT: Return ONLY a valid JSON array (no markdown, no backticks):
[
  {"question": "...", "type": "behavioral", "difficulty": "medium"},
  {"question": "...", "type": "technical", "difficulty": "hard"},
  {"question": "...", "type": "technical", "difficulty": "medium"},
  {"question": "...", "type": "system_design", "difficulty": "hard"},
  {"question": "...", "type": "problem_solving", "difficulty": "medium"},
  {"question": "...", "type": "culture_fit", "difficulty": "easy"}
]"""

REWRITE_PROMPT = """You are a world-class resume writer.

Rewrite this resume to be more professional, impactful, and ATS-optimized:

$resume_text

Rules: Use action verbs, quantify achievements, add ATS keywords, use the STAR method, add a professional summary.

Return ONLY the rewritten resume text. No commentary."""

FEEDBACK_PROMPT = """You are a senior technical interviewer at $company.

Question $question_number/$total_questions: "$question"
Candidate's answer: "$answer"

Return ONLY valid JSON (no markdown, no backticks):
{
  "score": <1-10>,
  "feedback": "<2-3 sentences>",
  "strengths": ["<strength 1>", "<strength 2>"],
  "improvements": ["<improvement 1>", "<improvement 2>"],
  "tip": "<One pro tip>"
}"""

COVER_LETTER_PROMPT = """You are a career assistant.

Write a concise, personalized cover letter (250-350 words) for the $job_title position at $company.
Use a professional yet warm tone, grounded in the candidate's resume.

Key points to highlight: $key_points

Resume:
$resume_text

Return ONLY the cover letter text. No commentary."""

CHAT_PROMPT = """You are a friendly, practical career coach. Answer in plain text (no JSON), in at most 200 words.

Conversation so far:
$history

User: $message"""

DEFAULT_COMPANY = "a top tech company"
DEFAULT_ROLE = "software engineering"
CHAT_HISTORY_TURNS = 10


def analysis_request(resume_text: str, skills: Any, company: str) -> PromptRequest:
    return PromptRequest(TaskKind.ANALYSIS, ANALYSIS_PROMPT, {
        "resume_text": resume_text,
        "skills": skills if skills is not None else [],
        "company": company,
    })


def questions_request(company: Optional[str], role: Optional[str], skills: Any,
                      seed_source: Callable[[], float] = random.random) -> PromptRequest:
    return PromptRequest(TaskKind.QUESTIONS, QUESTIONS_PROMPT, {
        "company": company or DEFAULT_COMPANY,
        "role": role or DEFAULT_ROLE,
        "skills": skills or [],
        "seed": repr(seed_source()),
    })


def rewrite_request(resume_text: str) -> PromptRequest:
    return PromptRequest(TaskKind.REWRITE, REWRITE_PROMPT, {"resume_text": resume_text})


def feedback_request(question: str, answer: str, company: Optional[str] = None,
                     question_number: Any = None, total_questions: Any = None) -> PromptRequest:
    return PromptRequest(TaskKind.FEEDBACK, FEEDBACK_PROMPT, {
        "company": company or DEFAULT_COMPANY,
        "question": question,
        "answer": answer,
        "question_number": str(question_number) if question_number else "?",
        "total_questions": str(total_questions) if total_questions else "?",
    })


def cover_letter_request(job_title: str, company: str, key_points: Optional[str] = None,
                         resume_text: Optional[str] = None) -> PromptRequest:
    return PromptRequest(TaskKind.COVER_LETTER, COVER_LETTER_PROMPT, {
        "job_title": job_title,
        "company": company,
        "key_points": key_points or "none given",
        "resume_text": resume_text or "(not provided)",
    })


def _format_history(history: Optional[List[Dict[str, Any]]]) -> str:
    lines = []
    for turn in (history or [])[-CHAT_HISTORY_TURNS:]:
        if not isinstance(turn, dict):
            continue
        content = str(turn.get("content") or "").strip()
        if not content:
            continue
        speaker = "User" if turn.get("role") == "user" else "Coach"
        lines.append(f"{speaker}: {content}")
    return "\n".join(lines) or "(no previous messages)"


def chat_request(message: str, history: Optional[List[Dict[str, Any]]] = None) -> PromptRequest:
    return PromptRequest(TaskKind.CHAT, CHAT_PROMPT, {
        "history": _format_history(history),
        "message": message,
    })
