"""
Response Validator / Normalizer
===============================
Turns the generation service's raw text into a GeneratedProgram.

The service may wrap its JSON in prose or markdown fences, and may leave
fields out. Missing or invalid fields are repaired with defaults; only a
response with no program structure at all is rejected.
"""
import json
from typing import Optional, Dict, Any

from program_types import (
    GenerationParams,
    GeneratedExercise,
    GeneratedWorkout,
    GeneratedProgram,
)


DEFAULT_SETS = 3
DEFAULT_REPS = '10'
DEFAULT_REST_SECONDS = 60


class ProgramParseError(ValueError):
    """Raised when a response holds no usable program structure."""


def extract_json_object(raw_text: str) -> Dict[str, Any]:
    """
    Return the first JSON object embedded in raw_text.

    Scans each '{' left to right and decodes from there; the first one that
    decodes to an object wins, anything after it is ignored.
    """
    if not isinstance(raw_text, str):
        raise ProgramParseError('Response is not text')

    decoder = json.JSONDecoder()
    start = raw_text.find('{')
    while start != -1:
        try:
            value, _ = decoder.raw_decode(raw_text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        start = raw_text.find('{', start + 1)

    raise ProgramParseError('No JSON found in response')


def _coerce_int(value) -> Optional[int]:
    """Whole number from int, integral float or numeric string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None


def _text_or_default(value, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _normalize_reps(value) -> str:
    if isinstance(value, bool):
        return DEFAULT_REPS
    if isinstance(value, (int, float)):
        number = _coerce_int(value)
        return str(number) if number is not None and number > 0 else DEFAULT_REPS
    return _text_or_default(value, DEFAULT_REPS)


def normalize_exercise(data: Dict[str, Any]) -> GeneratedExercise:
    sets = _coerce_int(data.get('sets'))
    rest = _coerce_int(data.get('restSeconds'))
    notes = data.get('notes')

    return GeneratedExercise(
        name=_text_or_default(data.get('name'), 'Unknown Exercise'),
        muscle_group=_text_or_default(data.get('muscleGroup'), 'General'),
        sets=sets if sets is not None and sets > 0 else DEFAULT_SETS,
        reps=_normalize_reps(data.get('reps')),
        rest_seconds=rest if rest is not None and rest >= 0 else DEFAULT_REST_SECONDS,
        notes=notes if isinstance(notes, str) and notes.strip() else None
    )


def normalize_workout(data: Dict[str, Any], index: int, duration: int) -> GeneratedWorkout:
    day_number = _coerce_int(data.get('dayNumber'))
    estimated = _coerce_int(data.get('estimatedDuration'))
    exercises = data.get('exercises')
    if not isinstance(exercises, list):
        exercises = []

    return GeneratedWorkout(
        name=_text_or_default(data.get('name'), f'Day {index + 1}'),
        day_number=day_number if day_number is not None and day_number > 0 else index + 1,
        focus=_text_or_default(data.get('focus'), 'General'),
        exercises=[normalize_exercise(ex) for ex in exercises if isinstance(ex, dict)],
        estimated_duration=estimated if estimated is not None and estimated > 0 else duration
    )


def normalize_program(raw_text: str, params: GenerationParams) -> GeneratedProgram:
    """
    Parse and repair a generation-service response.

    Args:
        raw_text: Text returned by the service (JSON, possibly inside prose)
        params: The params the program was requested with

    Returns:
        GeneratedProgram with every field filled in

    Raises:
        ProgramParseError: no JSON object, or name/workouts missing
    """
    parsed = extract_json_object(raw_text)

    name = parsed.get('name')
    workouts = parsed.get('workouts')
    if not isinstance(name, str) or not name.strip() or not isinstance(workouts, list):
        raise ProgramParseError('Invalid program structure')

    normalized = [
        normalize_workout(w, index, params.duration)
        for index, w in enumerate(w for w in workouts if isinstance(w, dict))
    ]
    if not normalized:
        raise ProgramParseError('Program has no workouts')

    description = parsed.get('description')

    return GeneratedProgram(
        name=name,
        description=description if isinstance(description, str) else '',
        days_per_week=len(normalized),
        workouts=normalized
    )
