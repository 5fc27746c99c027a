"""
Program Types
=============
Shared data structures for AI program generation and import.

Wire format (requests, responses, AI output) is camelCase; the dataclasses
use snake_case and are converted with program_to_dict / program_from_dict.
"""
from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field


SPLIT_TYPES = ('push_pull_legs', 'upper_lower', 'full_body', 'bro_split', 'custom')
EQUIPMENT_TYPES = ('barbell', 'dumbbell', 'cable', 'machine', 'bodyweight', 'kettlebell', 'bands')
DURATIONS = (30, 45, 60, 75, 90)
EXPERIENCE_LEVELS = ('beginner', 'intermediate', 'advanced')
GOALS = ('strength', 'hypertrophy', 'endurance', 'general_fitness')
MIN_DAYS_PER_WEEK = 3
MAX_DAYS_PER_WEEK = 6


class InvalidParamsError(ValueError):
    """Raised when generation parameters break an invariant."""


@dataclass
class GenerationParams:
    """User-chosen constraints for one program generation."""
    split_type: str
    equipment: List[str]
    duration: int  # minutes per session
    experience: str
    goal: str
    days_per_week: int
    focus_areas: List[str] = field(default_factory=list)
    custom_split: Optional[str] = None


@dataclass
class GeneratedExercise:
    name: str
    muscle_group: str
    sets: int
    reps: str  # e.g. "8-12" or "15"
    rest_seconds: int
    notes: Optional[str] = None


@dataclass
class GeneratedWorkout:
    name: str
    day_number: int  # 1-indexed within the program
    focus: str
    exercises: List[GeneratedExercise]
    estimated_duration: int  # minutes


@dataclass
class GeneratedProgram:
    name: str
    description: str
    days_per_week: int
    workouts: List[GeneratedWorkout]


@dataclass
class CatalogExercise:
    """An exercise row owned by the exercise catalog."""
    id: int
    name: str
    muscle_group: str = ''
    type: str = ''
    instructions: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Dict) -> 'CatalogExercise':
        return cls(
            id=row['id'],
            name=row.get('name') or '',
            muscle_group=row.get('muscle_group') or '',
            type=row.get('type') or '',
            instructions=row.get('instructions') or [],
            images=row.get('images') or []
        )


@dataclass
class RoutineExercise:
    exercise_id: int
    target_sets: int
    target_reps: int


@dataclass
class RoutineRecord:
    """A persisted routine; program_id is the grouping key shared by one generation."""
    id: int
    name: str
    program_id: Optional[str]
    exercises: List[RoutineExercise] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Dict, exercise_rows: List[Dict] = None) -> 'RoutineRecord':
        exercises = [
            RoutineExercise(
                exercise_id=ex['exercise_id'],
                target_sets=ex.get('sets') or 3,
                target_reps=ex.get('reps') or 10
            )
            for ex in sorted(exercise_rows or [], key=lambda r: r.get('order_index', 0))
        ]
        return cls(
            id=row['id'],
            name=row.get('name') or '',
            program_id=row.get('program_id'),
            exercises=exercises
        )


# ============================================
# VALIDATION
# ============================================

def validate_params(params: GenerationParams) -> GenerationParams:
    """
    Check the invariants of a GenerationParams.

    Raises:
        InvalidParamsError: describing the first broken rule
    """
    if params.split_type not in SPLIT_TYPES:
        raise InvalidParamsError(f'Invalid split type. Must be one of: {list(SPLIT_TYPES)}')

    if not params.equipment:
        raise InvalidParamsError('At least one piece of equipment is required')

    unknown = [e for e in params.equipment if e not in EQUIPMENT_TYPES]
    if unknown:
        raise InvalidParamsError(f'Unknown equipment: {", ".join(unknown)}')

    if params.duration not in DURATIONS:
        raise InvalidParamsError(f'Duration must be one of: {list(DURATIONS)}')

    if params.experience not in EXPERIENCE_LEVELS:
        raise InvalidParamsError(f'Invalid experience. Must be one of: {list(EXPERIENCE_LEVELS)}')

    if params.goal not in GOALS:
        raise InvalidParamsError(f'Invalid goal. Must be one of: {list(GOALS)}')

    if not MIN_DAYS_PER_WEEK <= params.days_per_week <= MAX_DAYS_PER_WEEK:
        raise InvalidParamsError(
            f'Days per week must be between {MIN_DAYS_PER_WEEK} and {MAX_DAYS_PER_WEEK}'
        )

    return params


def params_from_dict(data: Dict[str, Any]) -> GenerationParams:
    """Build validated GenerationParams from a camelCase request body."""
    if not isinstance(data, dict):
        raise InvalidParamsError('Request body must be a JSON object')

    missing = [k for k in ('splitType', 'equipment', 'duration', 'experience', 'goal', 'daysPerWeek')
               if data.get(k) in (None, '')]
    if missing:
        raise InvalidParamsError(f'Missing fields: {", ".join(missing)}')

    equipment = data['equipment']
    if isinstance(equipment, str):
        equipment = [equipment]

    try:
        duration = int(data['duration'])
        days_per_week = int(data['daysPerWeek'])
    except (TypeError, ValueError):
        raise InvalidParamsError('Duration and daysPerWeek must be whole numbers')

    params = GenerationParams(
        split_type=data['splitType'],
        # Keep first occurrence order, drop duplicates
        equipment=list(dict.fromkeys(equipment)),
        duration=duration,
        experience=data['experience'],
        goal=data['goal'],
        days_per_week=days_per_week,
        focus_areas=list(data.get('focusAreas') or []),
        custom_split=data.get('customSplit') or None
    )
    return validate_params(params)


# ============================================
# SERIALIZATION
# ============================================

def exercise_to_dict(exercise: GeneratedExercise) -> dict:
    result = {
        'name': exercise.name,
        'muscleGroup': exercise.muscle_group,
        'sets': exercise.sets,
        'reps': exercise.reps,
        'restSeconds': exercise.rest_seconds,
    }
    if exercise.notes:
        result['notes'] = exercise.notes
    return result


def program_to_dict(program: GeneratedProgram) -> dict:
    """Convert GeneratedProgram to the JSON-serializable camelCase shape."""
    return {
        'name': program.name,
        'description': program.description,
        'daysPerWeek': program.days_per_week,
        'workouts': [
            {
                'name': workout.name,
                'dayNumber': workout.day_number,
                'focus': workout.focus,
                'exercises': [exercise_to_dict(ex) for ex in workout.exercises],
                'estimatedDuration': workout.estimated_duration
            }
            for workout in program.workouts
        ]
    }


def _required_name(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what} name must be a non-empty string")
    return value


def program_from_dict(data: Dict[str, Any]) -> GeneratedProgram:
    """
    Rebuild a GeneratedProgram from its camelCase dict.

    Expects a program that was already normalized (e.g. one the client
    received from /api/program/generate and is sending back to save).
    Raises KeyError / TypeError on a structurally broken payload and
    ValueError when a name is empty, sets < 1 or rest is negative.
    """
    workouts = []
    for w in data['workouts']:
        exercises = []
        for ex in w.get('exercises', []):
            exercise = GeneratedExercise(
                name=_required_name(ex['name'], 'Exercise'),
                muscle_group=ex.get('muscleGroup', 'General'),
                sets=int(ex['sets']),
                reps=str(ex['reps']),
                rest_seconds=int(ex.get('restSeconds', 60)),
                notes=ex.get('notes')
            )
            if exercise.sets < 1:
                raise ValueError(f"Sets for '{exercise.name}' must be at least 1")
            if exercise.rest_seconds < 0:
                raise ValueError(f"Rest for '{exercise.name}' cannot be negative")
            exercises.append(exercise)

        workouts.append(GeneratedWorkout(
            name=_required_name(w['name'], 'Workout'),
            day_number=int(w['dayNumber']),
            focus=w.get('focus', 'General'),
            exercises=exercises,
            estimated_duration=int(w.get('estimatedDuration', 0))
        ))

    return GeneratedProgram(
        name=_required_name(data['name'], 'Program'),
        description=data.get('description', ''),
        days_per_week=int(data.get('daysPerWeek', len(workouts))),
        workouts=workouts
    )


def routine_to_dict(routine: RoutineRecord) -> dict:
    return {
        'id': routine.id,
        'name': routine.name,
        'programId': routine.program_id,
        'exercises': [
            {
                'exerciseId': ex.exercise_id,
                'sets': ex.target_sets,
                'reps': ex.target_reps
            }
            for ex in routine.exercises
        ]
    }
