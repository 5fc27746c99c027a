# Static exercise pools for the offline program generator.
# Each entry is only used when its equipment is available.
#
# sets / reps / rest_seconds set to None mean "use the program's
# experience/goal values"; the *_offset fields adjust those values.

EXERCISES = {
    # Push exercises
    "barbell_bench_press": {
        "name": "Barbell Bench Press",
        "muscle_group": "Chest",
        "equipment": "barbell",
        "sets": None, "reps": None, "rest_seconds": None
    },
    "db_shoulder_press": {
        "name": "Dumbbell Shoulder Press",
        "muscle_group": "Shoulders",
        "equipment": "dumbbell",
        "sets": None, "reps": None, "rest_seconds": None
    },
    "cable_flyes": {
        "name": "Cable Flyes",
        "muscle_group": "Chest",
        "equipment": "cable",
        "sets": None, "sets_offset": -1, "reps": "12-15", "rest_seconds": 60
    },
    "chest_press_machine": {
        "name": "Chest Press Machine",
        "muscle_group": "Chest",
        "equipment": "machine",
        "sets": None, "reps": None, "rest_seconds": None
    },
    "push_ups": {
        "name": "Push-ups",
        "muscle_group": "Chest",
        "equipment": "bodyweight",
        "sets": 3, "reps": "15-20", "rest_seconds": 45
    },
    "tricep_overhead_extension": {
        "name": "Tricep Overhead Extension",
        "muscle_group": "Triceps",
        "equipment": "dumbbell",
        "sets": 3, "reps": "10-12", "rest_seconds": 60
    },

    # Pull exercises
    "barbell_rows": {
        "name": "Barbell Rows",
        "muscle_group": "Back",
        "equipment": "barbell",
        "sets": None, "reps": None, "rest_seconds": None
    },
    "db_rows": {
        "name": "Dumbbell Rows",
        "muscle_group": "Back",
        "equipment": "dumbbell",
        "sets": None, "reps": None, "rest_seconds": None
    },
    "lat_pulldown": {
        "name": "Lat Pulldown",
        "muscle_group": "Back",
        "equipment": "cable",
        "sets": None, "reps": None, "rest_seconds": None
    },
    "pull_ups": {
        "name": "Pull-ups",
        "muscle_group": "Back",
        "equipment": "bodyweight",
        "sets": 3, "reps": "8-12", "rest_seconds": 90
    },
    "face_pulls": {
        "name": "Face Pulls",
        "muscle_group": "Rear Delts",
        "equipment": "cable",
        "sets": 3, "reps": "15-20", "rest_seconds": 45
    },
    "bicep_curls": {
        "name": "Bicep Curls",
        "muscle_group": "Biceps",
        "equipment": "dumbbell",
        "sets": 3, "reps": "10-12", "rest_seconds": 60
    },

    # Leg exercises
    "barbell_squat": {
        "name": "Barbell Squat",
        "muscle_group": "Legs",
        "equipment": "barbell",
        "sets": None, "reps": None, "rest_seconds": None, "rest_offset": 30
    },
    "romanian_deadlift": {
        "name": "Romanian Deadlift",
        "muscle_group": "Hamstrings",
        "equipment": "barbell",
        "sets": None, "reps": None, "rest_seconds": None
    },
    "db_lunges": {
        "name": "Dumbbell Lunges",
        "muscle_group": "Legs",
        "equipment": "dumbbell",
        "sets": 3, "reps": "10-12 each", "rest_seconds": 60
    },
    "leg_press": {
        "name": "Leg Press",
        "muscle_group": "Legs",
        "equipment": "machine",
        "sets": None, "reps": None, "rest_seconds": None
    },
    "leg_curl": {
        "name": "Leg Curl",
        "muscle_group": "Hamstrings",
        "equipment": "machine",
        "sets": 3, "reps": "12-15", "rest_seconds": 60
    },
    "bodyweight_squats": {
        "name": "Bodyweight Squats",
        "muscle_group": "Legs",
        "equipment": "bodyweight",
        "sets": 3, "reps": "20", "rest_seconds": 45
    },
}

# Pool order is the order exercises appear in a workout
POOLS = {
    "push": [
        "barbell_bench_press",
        "db_shoulder_press",
        "cable_flyes",
        "chest_press_machine",
        "push_ups",
        "tricep_overhead_extension",
    ],
    "pull": [
        "barbell_rows",
        "db_rows",
        "lat_pulldown",
        "pull_ups",
        "face_pulls",
        "bicep_curls",
    ],
    "legs": [
        "barbell_squat",
        "romanian_deadlift",
        "db_lunges",
        "leg_press",
        "leg_curl",
        "bodyweight_squats",
    ],
}
