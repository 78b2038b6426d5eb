# app.py
from __future__ import annotations
import logging
import os
import random
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# --- Load env BEFORE importing config (so config sees env) ---
ENV_PATH = Path(__file__).with_name(".env")
load_dotenv(ENV_PATH)

# --- Local modules ---
from config import DevConfig, ProdConfig, validate_required_secrets
from errors import BadRequest, CoachError
from llm_client import PromptDispatcher
from interviewer import generate_questions, score_answer
from reviewer import analyze_readiness, generate_cover_letter, rewrite_resume
from advisor import career_chat

LOG = logging.getLogger("http")

coach_bp = Blueprint("coach", __name__)

# bound to the app in create_app(); limits come from RATELIMIT_* config
limiter = Limiter(key_func=get_remote_address)

def _ai_limit() -> str:
    return current_app.config.get("RATELIMIT_AI", "20 per minute")

def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

def _dispatcher() -> PromptDispatcher:
    return current_app.extensions["dispatcher"]

def _body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def _text(data: Dict[str, Any], key: str) -> str:
    val = data.get(key)
    return val.strip() if isinstance(val, str) else ""

# ------------------------------
# Routes
# ------------------------------
@coach_bp.get("/")
def home():
    return jsonify({"status": "ok", "message": "Backend is up and running!"})

@coach_bp.post("/analyze")
@limiter.limit(_ai_limit)
def analyze():
    """
    Request: { "resumeText": "...", "skills": [...], "company": "..." }
    Response: { "result": { "readinessScore": 72, "roadmap": [...], ... } }
    """
    data = _body()
    resume_text = _text(data, "resumeText")
    company = _text(data, "company")
    if not resume_text or not company:
        raise BadRequest("Resume text and target company are required")

    result = analyze_readiness(_dispatcher(), resume_text, data.get("skills") or [], company)
    return jsonify({"result": result})

@coach_bp.post("/generate-questions")
@limiter.limit(_ai_limit)
def questions():
    data = _body()
    qs = generate_questions(
        _dispatcher(),
        _text(data, "company") or None,
        _text(data, "role") or None,
        data.get("skills") or [],
        seed_source=current_app.extensions["seed_source"],
    )
    return jsonify({"questions": qs})

@coach_bp.post("/rewrite-resume")
@limiter.limit(_ai_limit)
def rewrite():
    data = _body()
    resume_text = _text(data, "resumeText")
    if not resume_text:
        raise BadRequest("Resume text is required")
    return jsonify({"rewrittenResume": rewrite_resume(_dispatcher(), resume_text)})

@coach_bp.post("/interview")
@limiter.limit(_ai_limit)
def interview():
    data = _body()
    question = _text(data, "question")
    answer = _text(data, "answer")
    if not question or not answer:
        raise BadRequest("Question and answer are required")

    result = score_answer(
        _dispatcher(), question, answer,
        company=_text(data, "company") or None,
        question_number=data.get("questionNumber"),
        total_questions=data.get("totalQuestions"),
    )
    return jsonify({"result": result})

@coach_bp.post("/generate-cover-letter")
@limiter.limit(_ai_limit)
def cover_letter():
    data = _body()
    job_title = _text(data, "jobTitle")
    company = _text(data, "company")
    if not job_title or not company:
        raise BadRequest("Job title and company are required")

    letter = generate_cover_letter(
        _dispatcher(), job_title, company,
        key_points=_text(data, "keyPoints") or None,
        resume_text=_text(data, "resumeText") or None,
    )
    return jsonify({"coverLetter": letter})

@coach_bp.post("/chat")
@limiter.limit(_ai_limit)
def chat():
    data = _body()
    message = _text(data, "message")
    if not message:
        raise BadRequest("Message is required")
    history = data.get("conversationHistory")
    reply = career_chat(_dispatcher(), message, history if isinstance(history, list) else [])
    return jsonify({"reply": reply})

# ------------------------------
# Errors
# ------------------------------
def _handle_coach_error(e: CoachError):
    if e.status_code >= 500:
        LOG.error("%s on %s %s: %s", type(e).__name__, request.method, request.path, e)
    return jsonify({"error": e.public_message}), e.status_code

def _handle_not_found(e):
    return jsonify({"error": "Route not found"}), 404

def _handle_method_not_allowed(e):
    allow = ", ".join(getattr(e, "valid_methods", None) or [])
    return jsonify({"error": "Method not allowed"}), 405, {"Allow": allow}

# ------------------------------
# App factory
# ------------------------------
def create_app(config_object=None, dispatcher: PromptDispatcher = None, seed_source=None) -> Flask:
    app = Flask(__name__)
    if config_object is None:
        validate_required_secrets()  # raises only when ENV=prod and the key is missing
        config_object = ProdConfig if os.getenv("ENV") == "prod" else DevConfig
    app.config.from_object(config_object)
    app.url_map.strict_slashes = False
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}},
        supports_credentials=False,
        allow_headers=["Authorization", "Content-Type"],
        methods=["GET", "POST", "OPTIONS"],
    )
    limiter.init_app(app)

    app.extensions["dispatcher"] = dispatcher or PromptDispatcher.from_config(app.config)
    app.extensions["seed_source"] = seed_source or random.random

    @app.before_request
    def _log_request():
        LOG.info("%s %s", request.method, request.path)

    app.register_blueprint(coach_bp)
    app.register_error_handler(CoachError, _handle_coach_error)
    app.register_error_handler(404, _handle_not_found)
    app.register_error_handler(405, _handle_method_not_allowed)

    if not app.extensions["dispatcher"].api_key:
        LOG.error("GROQ_API_KEY is missing! Add it to the .env file.")
    return app

# ------------------------------
# Entrypoint
# ------------------------------
if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=app.config.get("DEBUG", False))
