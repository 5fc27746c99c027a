"""
Prompt Builder

Turns GenerationParams into the single instruction block sent to the
generation service. Pure string work, no I/O.
"""
from typing import Optional

from program_types import GenerationParams


SPLIT_DESCRIPTIONS = {
    'push_pull_legs': 'Push/Pull/Legs - 3 distinct workouts rotating push muscles, pull muscles, and legs',
    'upper_lower': 'Upper/Lower - Alternating between upper body and lower body days',
    'full_body': 'Full Body - Each workout targets all major muscle groups',
    'bro_split': 'Body Part Split - Each day focuses on 1-2 muscle groups',
}


def get_split_description(split_type: str, custom_split: Optional[str] = None) -> str:
    """Human-readable split text; unknown split tags are returned as-is."""
    if split_type == 'custom':
        return custom_split or 'Custom split'
    return SPLIT_DESCRIPTIONS.get(split_type, split_type)


def build_prompt(params: GenerationParams) -> str:
    """Build the program-generation prompt, ending with the JSON shape to return."""
    equipment_list = ', '.join(params.equipment)
    split_description = get_split_description(params.split_type, params.custom_split)
    focus_text = f"Focus areas: {', '.join(params.focus_areas)}" if params.focus_areas else ''

    return f"""You are a professional fitness coach. Generate a {params.days_per_week}-day workout program.

REQUIREMENTS:
- Split Type: {split_description}
- Available Equipment: {equipment_list}
- Workout Duration: {params.duration} minutes per session
- Experience Level: {params.experience}
- Primary Goal: {params.goal}
{focus_text}

RULES:
1. Each workout should fit within {params.duration} minutes
2. Only use exercises that can be performed with: {equipment_list}
3. Include proper warm-up sets in the set counts
4. For {params.experience} level, adjust volume and intensity appropriately
5. For {params.goal} goal, use appropriate rep ranges and rest periods
6. Return exactly {params.days_per_week} workouts, numbered from 1

Respond ONLY with valid JSON in this exact format:
{{
  "name": "Program Name",
  "description": "Brief description",
  "daysPerWeek": {params.days_per_week},
  "workouts": [
    {{
      "name": "Day 1 - Push",
      "dayNumber": 1,
      "focus": "Chest, Shoulders, Triceps",
      "exercises": [
        {{
          "name": "Bench Press",
          "muscleGroup": "Chest",
          "sets": 4,
          "reps": "8-10",
          "restSeconds": 90,
          "notes": "Optional tip"
        }}
      ],
      "estimatedDuration": 45
    }}
  ]
}}

Generate the complete program now:"""
