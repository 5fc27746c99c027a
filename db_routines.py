"""
Database functions for routines
- Creating routines from mapped exercises
- Looking up and deleting routines by program grouping key
"""
from typing import List, Dict, Optional
from db import get_supabase_client
from program_types import RoutineRecord


# ============================================
# ROUTINE QUERIES
# ============================================

def create_routine(name: str, exercise_mappings: List[Dict], program_id: Optional[str],
                   user_id: str) -> Optional[RoutineRecord]:
    """
    Create a routine and its exercise rows.

    Args:
        name: Routine name
        exercise_mappings: Dicts with 'exercise_id', 'sets', 'reps' (in order)
        program_id: Grouping key shared by routines of one program, or None
        user_id: Owner

    Returns:
        The created RoutineRecord, or None if the routine insert returned nothing
    """
    supabase = get_supabase_client()
    safe_name = str(name or 'New Routine')

    print(f"[ROUTINES] Creating routine: {safe_name} for program: {program_id}")
    response = supabase.table('routines').insert({
        'name': safe_name,
        'program_id': program_id or None,
        'user_id': user_id
    }).execute()

    if not response.data:
        print("[ROUTINES] Failed to get routine ID after insert")
        return None

    routine = response.data[0]

    rows = []
    for mapping in exercise_mappings:
        try:
            exercise_id = int(mapping.get('exercise_id'))
        except (TypeError, ValueError):
            print(f"[ROUTINES] Skipping invalid exercise ID for routine {routine['id']}: {mapping}")
            continue

        rows.append({
            'routine_id': routine['id'],
            'exercise_id': exercise_id,
            'order_index': len(rows),
            'sets': _positive_int(mapping.get('sets'), 3),
            'reps': _positive_int(mapping.get('reps'), 10)
        })

    if rows:
        supabase.table('routine_exercises').insert(rows).execute()

    return RoutineRecord.from_row(routine, rows)


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _attach_exercises(supabase, routine_rows: List[Dict]) -> List[RoutineRecord]:
    if not routine_rows:
        return []

    ids = [r['id'] for r in routine_rows]
    exercises_response = supabase.table('routine_exercises')\
        .select('*')\
        .in_('routine_id', ids)\
        .order('order_index')\
        .execute()

    by_routine = {}
    for row in exercises_response.data:
        by_routine.setdefault(row['routine_id'], []).append(row)

    return [RoutineRecord.from_row(r, by_routine.get(r['id'], [])) for r in routine_rows]


def get_user_routines(user_id: str) -> List[RoutineRecord]:
    """Get all routines for a user, oldest first."""
    supabase = get_supabase_client()

    response = supabase.table('routines')\
        .select('*')\
        .eq('user_id', user_id)\
        .order('id')\
        .execute()

    return _attach_exercises(supabase, response.data)


def get_program_routines(user_id: str, program_id: str) -> List[RoutineRecord]:
    """Get every routine created from one generated program."""
    supabase = get_supabase_client()

    response = supabase.table('routines')\
        .select('*')\
        .eq('user_id', user_id)\
        .eq('program_id', program_id)\
        .order('id')\
        .execute()

    return _attach_exercises(supabase, response.data)


def delete_program_routines(user_id: str, program_id: str) -> int:
    """Delete all routines sharing a grouping key. Returns how many were deleted."""
    supabase = get_supabase_client()

    response = supabase.table('routines')\
        .select('id')\
        .eq('user_id', user_id)\
        .eq('program_id', program_id)\
        .execute()

    ids = [r['id'] for r in response.data]
    if not ids:
        return 0

    # Delete in order due to foreign keys
    supabase.table('routine_exercises').delete().in_('routine_id', ids).execute()
    supabase.table('routines').delete().in_('id', ids).execute()

    print(f"[ROUTINES] Deleted {len(ids)} routines for program {program_id}")
    return len(ids)
