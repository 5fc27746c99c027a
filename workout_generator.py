"""
Workout Generator Module

Builds a complete program without the AI service, from the static
exercise pools in data/fallback_exercises.py.

Used both when no API key is configured and whenever the AI path fails,
so it must always return a valid program for any GenerationParams.
"""

from typing import List, Dict, Tuple, Optional
from dataclasses import dataclass, field, replace

from data.fallback_exercises import EXERCISES, POOLS
from program_types import (
    GenerationParams,
    GeneratedExercise,
    GeneratedWorkout,
    GeneratedProgram,
)


SETS_BY_EXPERIENCE = {
    'beginner': 3,
    'intermediate': 4,
    'advanced': 5,
}

# goal -> (rep range, rest seconds) for main lifts
REPS_AND_REST_BY_GOAL = {
    'strength': ('4-6', 180),
    'hypertrophy': ('8-12', 90),
    'endurance': ('15-20', 60),
}
DEFAULT_REPS_AND_REST = ('10-12', 60)

SPLIT_NAMES = {
    'push_pull_legs': 'Push/Pull/Legs',
    'upper_lower': 'Upper/Lower',
    'full_body': 'Full Body',
    'bro_split': 'Body Part',
    'custom': 'Custom',
}

GOAL_LABELS = {
    'strength': 'strength',
    'hypertrophy': 'hypertrophy',
    'endurance': 'endurance',
    'general_fitness': 'general fitness',
}


@dataclass
class PoolPick:
    """Take exercises from one pool, optionally filtered by muscle group text."""
    pool: str  # 'push', 'pull', 'legs', 'full_body'
    limit: Optional[int] = None
    muscles: Tuple[str, ...] = ()


@dataclass
class DaySlot:
    """One day of a split template."""
    name: str
    focus: str
    picks: List[PoolPick] = field(default_factory=list)


# Every split defines six days so any 3-6 day request can be sliced from it
BRO_SPLIT_DAYS = [
    DaySlot("Chest Day", "Chest", [PoolPick("push", 5, ("Chest",))]),
    DaySlot("Back Day", "Back", [PoolPick("pull", 5, ("Back",))]),
    DaySlot("Shoulder Day", "Shoulders", [PoolPick("push", 5, ("Shoulder", "Delt"))]),
    DaySlot("Leg Day", "Legs", [PoolPick("legs", 6)]),
    DaySlot("Arm Day", "Biceps, Triceps", [PoolPick("pull", None, ("Biceps",)),
                                          PoolPick("push", None, ("Triceps",))]),
    DaySlot("Full Body", "Active Recovery", [PoolPick("full_body", 4)]),
]

SPLIT_TEMPLATES = {
    'push_pull_legs': [
        DaySlot("Push Day", "Chest, Shoulders, Triceps", [PoolPick("push", 6)]),
        DaySlot("Pull Day", "Back, Biceps", [PoolPick("pull", 6)]),
        DaySlot("Leg Day", "Quads, Hamstrings, Glutes", [PoolPick("legs", 6)]),
        DaySlot("Push Day 2", "Chest, Shoulders, Triceps", [PoolPick("push", 6)]),
        DaySlot("Pull Day 2", "Back, Biceps", [PoolPick("pull", 6)]),
        DaySlot("Leg Day 2", "Quads, Hamstrings, Glutes", [PoolPick("legs", 6)]),
    ],
    'upper_lower': [
        DaySlot("Upper Body A", "Chest, Back, Shoulders", [PoolPick("push", 3), PoolPick("pull", 3)]),
        DaySlot("Lower Body A", "Quads, Hamstrings, Glutes", [PoolPick("legs", 6)]),
        DaySlot("Upper Body B", "Chest, Back, Arms", [PoolPick("push", 3), PoolPick("pull", 3)]),
        DaySlot("Lower Body B", "Quads, Hamstrings, Calves", [PoolPick("legs", 6)]),
        DaySlot("Upper Body C", "Full Upper", [PoolPick("push", 3), PoolPick("pull", 3)]),
        DaySlot("Lower Body C", "Full Lower", [PoolPick("legs", 6)]),
    ],
    'full_body': [
        DaySlot(f"Full Body {letter}", "All Major Muscle Groups", [PoolPick("full_body")])
        for letter in "ABCDEF"
    ],
    'bro_split': BRO_SPLIT_DAYS,
}


def get_split_name(split_type: str) -> str:
    return SPLIT_NAMES.get(split_type, 'Workout')


def get_split_template(split_type: str) -> List[DaySlot]:
    """Day template for a split; bro split covers custom and unknown tags."""
    return SPLIT_TEMPLATES.get(split_type, BRO_SPLIT_DAYS)


def build_exercise_pools(params: GenerationParams) -> Dict[str, List[GeneratedExercise]]:
    """
    Build the push / pull / legs / full_body pools for the given params.

    An exercise is included only when its equipment is in params.equipment,
    so pools may come out empty.
    """
    base_sets = SETS_BY_EXPERIENCE.get(params.experience, 5)
    reps, rest = REPS_AND_REST_BY_GOAL.get(params.goal, DEFAULT_REPS_AND_REST)
    available = set(params.equipment)

    pools = {}
    for pool_name, exercise_ids in POOLS.items():
        pools[pool_name] = []
        for exercise_id in exercise_ids:
            entry = EXERCISES[exercise_id]
            if entry['equipment'] not in available:
                continue

            sets = entry['sets'] if entry['sets'] is not None else base_sets
            sets = max(sets + entry.get('sets_offset', 0), 1)
            rest_seconds = entry['rest_seconds'] if entry['rest_seconds'] is not None else rest

            pools[pool_name].append(GeneratedExercise(
                name=entry['name'],
                muscle_group=entry['muscle_group'],
                sets=sets,
                reps=entry['reps'] or reps,
                rest_seconds=rest_seconds + entry.get('rest_offset', 0)
            ))

    pools['full_body'] = pools['push'][:2] + pools['pull'][:2] + pools['legs'][:2]
    return pools


def _pick_exercises(picks: List[PoolPick], pools: Dict[str, List[GeneratedExercise]]) -> List[GeneratedExercise]:
    exercises = []
    for pick in picks:
        candidates = pools.get(pick.pool, [])
        if pick.muscles:
            candidates = [
                ex for ex in candidates
                if any(m in ex.muscle_group for m in pick.muscles)
            ]
        if pick.limit is not None:
            candidates = candidates[:pick.limit]
        # Copies so workouts never share exercise objects
        exercises.extend(replace(ex) for ex in candidates)
    return exercises


def generate_fallback_program(params: GenerationParams) -> GeneratedProgram:
    """
    Main entry point: builds a program from the static templates.

    Args:
        params: Generation parameters (days_per_week 3-6)

    Returns:
        GeneratedProgram with exactly days_per_week workouts numbered 1..N
    """
    pools = build_exercise_pools(params)
    template = get_split_template(params.split_type)

    workouts = []
    for i, slot in enumerate(template[:params.days_per_week]):
        workouts.append(GeneratedWorkout(
            name=slot.name,
            day_number=i + 1,
            focus=slot.focus,
            exercises=_pick_exercises(slot.picks, pools),
            estimated_duration=params.duration
        ))

    experience = params.experience[:1].upper() + params.experience[1:]
    goal = GOAL_LABELS.get(params.goal, params.goal)

    return GeneratedProgram(
        name=f"{experience} {get_split_name(params.split_type)} Program",
        description=f"A {params.days_per_week}-day {goal} focused program designed for {params.experience} lifters.",
        days_per_week=len(workouts),
        workouts=workouts
    )
