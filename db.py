from typing import List
from supabase import create_client, Client
from config import Config
from program_types import CatalogExercise

def get_supabase_client() -> Client:
    """Get a Supabase client instance."""
    return create_client(Config.SUPABASE_URL, Config.SUPABASE_KEY)


# ============================================
# EXERCISE CATALOG QUERIES
# ============================================

def get_all_exercises(user_id: str = None) -> List[CatalogExercise]:
    """
    Fetch the exercise catalog in insertion (id) order.

    Includes the shared exercises and, when user_id is given, that user's
    custom ones.
    """
    supabase = get_supabase_client()
    query = supabase.table('exercises').select('*')
    if user_id:
        query = query.or_(f'user_id.is.null,user_id.eq.{user_id}')
    response = query.order('id').execute()
    return [CatalogExercise.from_row(row) for row in response.data]


def create_exercise(name: str, muscle_group: str, exercise_type: str, instructions: list,
                    images: list, user_id: str = None) -> CatalogExercise:
    """Append a custom exercise to the catalog. Returns None if the insert returned nothing."""
    supabase = get_supabase_client()

    response = supabase.table('exercises').insert({
        'name': name,
        'muscle_group': muscle_group,
        'type': exercise_type,
        'instructions': instructions or [],
        'images': images or [],
        'is_custom': True,
        'user_id': user_id
    }).execute()

    return CatalogExercise.from_row(response.data[0]) if response.data else None
