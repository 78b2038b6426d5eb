# advisor.py
from typing import Any, Dict, List, Optional

from parsers import strip_fences
import prompts

def career_chat(dispatcher, message: str, history: Optional[List[Dict[str, Any]]] = None) -> str:
    """Free-form coaching reply; only the last few turns of history are sent."""
    request = prompts.chat_request(message, history)
    return strip_fences(dispatcher.dispatch(request.text).unwrap())
