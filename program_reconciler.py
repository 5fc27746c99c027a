"""
Program Reconciler
==================
Imports a confirmed GeneratedProgram into the exercise catalog and routines.

For each exercise, in order:
1. Reuse a catalog exercise whose name matches exactly (case-insensitive)
2. Else reuse the first one whose name contains, or is contained in, it
3. Else create a new catalog exercise

Then one routine per workout, all tagged with the same grouping key
(ai|<name>|<timestamp ms>) so the program can be listed or deleted as a set.

Creations are never rolled back: if a store call fails part way, the
routines already created stay and are reported on the raised error.
"""
import re
import time
from typing import List, Dict, Optional, Callable, Tuple

from program_types import GeneratedProgram, CatalogExercise, RoutineRecord


GROUPING_KEY_PREFIX = 'ai'
GROUPING_KEY_DELIMITER = '|'
LEGACY_KEY_PREFIX = 'ai-'
NEW_EXERCISE_TYPE = 'Gym'
DEFAULT_TARGET_REPS = 10

_LEADING_INT = re.compile(r'\s*(\d+)')


class ProgramSaveError(Exception):
    """A store rejected a write while saving a program."""

    def __init__(self, message: str, created_routines: List[RoutineRecord] = None):
        super().__init__(message)
        self.created_routines = created_routines or []


# ============================================
# REPS / GROUPING KEY
# ============================================

def parse_target_reps(reps_text: str) -> int:
    """Leading whole number of a rep text ("8-12" -> 8), or 10 if there is none."""
    match = _LEADING_INT.match(str(reps_text or ''))
    if match:
        reps = int(match.group(1))
        if reps > 0:
            return reps
    return DEFAULT_TARGET_REPS


def sanitize_program_name(name: str) -> str:
    return (name or '').replace(GROUPING_KEY_DELIMITER, '-')


def make_program_grouping_key(name: str, timestamp_ms: int = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return GROUPING_KEY_DELIMITER.join(
        [GROUPING_KEY_PREFIX, sanitize_program_name(name), str(timestamp_ms)]
    )


def parse_program_grouping_key(program_id: str) -> Optional[str]:
    """
    Display name for an AI program grouping key.

    ai|Name|1700000000000 -> 'Name'; legacy ai-1700000000000 -> 'AI Generated Plan'.
    Returns None for keys that were not made by program generation.
    """
    if not program_id:
        return None

    if program_id.startswith(GROUPING_KEY_PREFIX + GROUPING_KEY_DELIMITER):
        parts = program_id.split(GROUPING_KEY_DELIMITER)
        if len(parts) >= 2 and parts[1]:
            return parts[1]
        return 'AI Workout Plan'

    if program_id.startswith(LEGACY_KEY_PREFIX):
        return 'AI Generated Plan'

    return None


# ============================================
# CATALOG MATCHING
# ============================================

def find_catalog_match(name: str, catalog: List[CatalogExercise]) -> Optional[CatalogExercise]:
    """
    Find the catalog exercise for a generated exercise name.

    Exact (case-insensitive) match wins over containment; within each rule
    the first entry in catalog order wins.
    """
    wanted = (name or '').strip().lower()
    if not wanted:
        return None

    for exercise in catalog:
        if exercise.name.lower() == wanted:
            return exercise

    for exercise in catalog:
        existing = exercise.name.lower()
        if not existing:
            continue
        if wanted in existing or existing in wanted:
            return exercise

    return None


# ============================================
# RECONCILIATION
# ============================================

def reconcile(
    program: GeneratedProgram,
    catalog_lookup: Callable[[], List[CatalogExercise]],
    catalog_create: Callable[..., CatalogExercise],
    routine_create: Callable[[str, List[Dict], str], RoutineRecord],
    timestamp_ms: int = None
) -> List[RoutineRecord]:
    """
    Map a program onto the catalog and create its routines.

    Args:
        program: The confirmed program
        catalog_lookup: () -> all catalog exercises in insertion order
        catalog_create: (name, muscle_group, exercise_type, instructions, images) -> CatalogExercise
        routine_create: (name, exercise_mappings, program_id) -> RoutineRecord
        timestamp_ms: Creation time for the grouping key (defaults to now)

    Returns:
        Created routines, one per workout, in workout order

    Raises:
        ProgramSaveError: a store call failed; created_routines holds what was saved
    """
    program_id = make_program_grouping_key(program.name, timestamp_ms)
    created_routines = []

    try:
        catalog = list(catalog_lookup())
    except Exception as e:
        raise ProgramSaveError(f'Failed to load exercises: {e}') from e

    created_count = 0
    for workout in program.workouts:
        mappings = []

        # Sequential on purpose: later exercises must see entries created above
        for ex in workout.exercises:
            match = find_catalog_match(ex.name, catalog)

            if match is None:
                try:
                    match = catalog_create(
                        ex.name,
                        ex.muscle_group,
                        NEW_EXERCISE_TYPE,
                        [ex.notes] if ex.notes else [],
                        []
                    )
                except Exception as e:
                    raise ProgramSaveError(
                        f"Failed to create exercise '{ex.name}': {e}", created_routines
                    ) from e
                if match is None:
                    raise ProgramSaveError(
                        f"Failed to create exercise '{ex.name}'", created_routines
                    )
                catalog.append(match)
                created_count += 1

            mappings.append({
                'exercise_id': match.id,
                'sets': ex.sets,
                'reps': parse_target_reps(ex.reps)
            })

        try:
            routine = routine_create(workout.name, mappings, program_id)
        except Exception as e:
            raise ProgramSaveError(
                f"Failed to create routine '{workout.name}': {e}", created_routines
            ) from e
        if routine is None:
            raise ProgramSaveError(f"Failed to create routine '{workout.name}'", created_routines)

        created_routines.append(routine)

    print(f"[RECONCILE] {program.name}: {len(created_routines)} routines, "
          f"{created_count} new exercises ({program_id})")
    return created_routines


def reconcile_and_save(program: GeneratedProgram, user_id: str) -> List[RoutineRecord]:
    """Reconcile a program against the Supabase catalog and routine tables for a user."""
    import db
    import db_routines

    return reconcile(
        program,
        catalog_lookup=lambda: db.get_all_exercises(user_id),
        catalog_create=lambda name, muscle_group, exercise_type, instructions, images: db.create_exercise(
            name, muscle_group, exercise_type, instructions, images, user_id=user_id
        ),
        routine_create=lambda name, mappings, program_id: db_routines.create_routine(
            name, mappings, program_id, user_id
        )
    )


# ============================================
# GROUPING
# ============================================

def group_routines_by_program(routines: List[RoutineRecord]) -> Tuple[List[Dict], List[RoutineRecord]]:
    """
    Split routines into program groups (by program_id) and standalone routines.

    Returns:
        (programs, standalone) where programs are dicts with
        'program_id', 'name' and 'routines', in first-seen order
    """
    groups = {}
    standalone = []

    for routine in routines:
        if routine.program_id:
            groups.setdefault(routine.program_id, []).append(routine)
        else:
            standalone.append(routine)

    programs = [
        {
            'program_id': program_id,
            'name': parse_program_grouping_key(program_id) or 'Unknown Program',
            'routines': members
        }
        for program_id, members in groups.items()
    ]
    return programs, standalone
