"""
AI Program Module
=================
Generates multi-day workout programs with the Anthropic API.

generate_program() never fails: with no API key, or when the call or its
response goes wrong, it returns the rule-based program from
workout_generator instead.

GenerationTasks runs generations in the background. A task the caller has
abandoned keeps running until the request finishes or times out, but its
result is thrown away.
"""
import threading
import uuid
import requests
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Optional, Dict, Callable

from config import Config
from program_types import GenerationParams, GeneratedProgram
from prompt_builder import build_prompt
from program_validator import normalize_program, ProgramParseError
from workout_generator import generate_fallback_program


# ============================================
# CONFIGURATION
# ============================================

AI_PROGRAM_CONFIG = {
    'model': Config.ANTHROPIC_MODEL,
    'max_tokens': Config.ANTHROPIC_MAX_TOKENS,
    'timeout': Config.ANTHROPIC_TIMEOUT,
}

ANTHROPIC_MESSAGES_URL = 'https://api.anthropic.com/v1/messages'


def is_ai_configured() -> bool:
    """Check if an Anthropic API key is configured."""
    return bool(Config.ANTHROPIC_API_KEY)


# ============================================
# ANTHROPIC API HELPER
# ============================================

def _call_anthropic_api(prompt: str) -> Optional[str]:
    """
    Send one prompt to the Anthropic API and return the response text.
    Single attempt, no retries. Returns None on any failure.
    """
    api_key = Config.ANTHROPIC_API_KEY

    if not api_key:
        print("[AI PROGRAM] No API key configured")
        return None

    try:
        response = requests.post(
            ANTHROPIC_MESSAGES_URL,
            headers={
                'Content-Type': 'application/json',
                'x-api-key': api_key,
                'anthropic-version': '2023-06-01'
            },
            json={
                'model': AI_PROGRAM_CONFIG['model'],
                'max_tokens': AI_PROGRAM_CONFIG['max_tokens'],
                'messages': [{'role': 'user', 'content': prompt}]
            },
            timeout=AI_PROGRAM_CONFIG['timeout']
        )

        if not response.ok:
            print(f"[AI PROGRAM] API error: {response.status_code} - {response.text[:200]}")
            return None

        result = response.json()
        content = result.get('content') or [{}]
        text = content[0].get('text') if isinstance(content[0], dict) else None

        usage = result.get('usage', {})
        print(f"[AI PROGRAM] {AI_PROGRAM_CONFIG['model']} used "
              f"{usage.get('input_tokens', 0)} in / {usage.get('output_tokens', 0)} out tokens")

        if not text:
            print("[AI PROGRAM] Response had no text content")
            return None

        return text

    except requests.exceptions.Timeout:
        print("[AI PROGRAM] API timeout")
        return None
    except requests.exceptions.RequestException as e:
        print(f"[AI PROGRAM] Request failed: {e}")
        return None
    except ValueError as e:
        # Body was not JSON
        print(f"[AI PROGRAM] Could not decode API response: {e}")
        return None


# ============================================
# GENERATION
# ============================================

def generate_program(params: GenerationParams) -> GeneratedProgram:
    """
    Generate a workout program, falling back to templates when AI is unavailable.

    Args:
        params: Validated generation parameters

    Returns:
        GeneratedProgram - always; this function does not raise
    """
    if not is_ai_configured():
        print("[AI PROGRAM] AI not configured - using template program")
        return generate_fallback_program(params)

    try:
        content = _call_anthropic_api(build_prompt(params))
        if content is None:
            return generate_fallback_program(params)

        program = normalize_program(content, params)
        print(f"[AI PROGRAM] Generated '{program.name}' with {len(program.workouts)} workouts")
        return program

    except ProgramParseError as e:
        print(f"[AI PROGRAM] Failed to parse AI response: {e}")
    except Exception as e:
        print(f"[AI PROGRAM] Unexpected error: {e}")

    return generate_fallback_program(params)


# ============================================
# BACKGROUND GENERATION TASKS
# ============================================

class UnknownTaskError(KeyError):
    """Raised for a task id this pool never issued (or already forgot)."""


class GenerationTasks:
    """
    Thread pool of program generations.
    - submit(params) -> task_id
    - status(task_id) -> 'pending' | 'done' | 'abandoned'
    - result(task_id, timeout=None) -> program, or None once abandoned
    - abandon(task_id) -> stop caring; the request itself is not cancelled

    An abandoned task is forgotten as soon as its request finishes, so its
    result is never kept around.
    """

    def __init__(self, max_workers: int = 2,
                 generate: Callable[[GenerationParams], GeneratedProgram] = None):
        self.exec = ThreadPoolExecutor(max_workers=max_workers)
        self.generate = generate or generate_program
        self.tasks: Dict[str, Future] = {}
        self.abandoned = set()
        self._lock = threading.Lock()

    def _get(self, task_id: str) -> Future:
        with self._lock:
            if task_id not in self.tasks:
                raise UnknownTaskError(task_id)
            return self.tasks[task_id]

    def submit(self, params: GenerationParams) -> str:
        task_id = uuid.uuid4().hex
        future = self.exec.submit(self.generate, params)
        with self._lock:
            self.tasks[task_id] = future
        return task_id

    def is_abandoned(self, task_id: str) -> bool:
        with self._lock:
            return task_id in self.abandoned

    def _is_discarded(self, task_id: str) -> bool:
        with self._lock:
            return task_id in self.abandoned or task_id not in self.tasks

    def status(self, task_id: str) -> str:
        future = self._get(task_id)
        if self.is_abandoned(task_id):
            return 'abandoned'
        return 'done' if future.done() else 'pending'

    def result(self, task_id: str, timeout: float = None) -> Optional[GeneratedProgram]:
        future = self._get(task_id)
        if self.is_abandoned(task_id):
            return None
        program = future.result(timeout=timeout)
        # Abandoned or forgotten while we were waiting
        if self._is_discarded(task_id):
            return None
        return program

    def abandon(self, task_id: str) -> None:
        future = self._get(task_id)
        with self._lock:
            self.abandoned.add(task_id)
        print(f"[AI PROGRAM] Task {task_id} abandoned (running: {not future.done()})")
        future.add_done_callback(lambda _: self.forget(task_id))

    def forget(self, task_id: str) -> None:
        """Drop bookkeeping for a task the caller is finished with."""
        with self._lock:
            self.tasks.pop(task_id, None)
            self.abandoned.discard(task_id)


generation_tasks = GenerationTasks(max_workers=Config.GENERATION_WORKERS)
