"""
Program Reconciler Unit Tests
=============================
Run with: python -m pytest test_program_reconciler.py -v
"""
import unittest
from unittest.mock import patch, MagicMock

from program_types import (
    CatalogExercise,
    GeneratedExercise,
    GeneratedWorkout,
    GeneratedProgram,
    RoutineRecord,
    RoutineExercise,
)
from program_reconciler import (
    ProgramSaveError,
    find_catalog_match,
    group_routines_by_program,
    make_program_grouping_key,
    parse_program_grouping_key,
    parse_target_reps,
    reconcile,
    reconcile_and_save,
)


def exercise(name, sets=3, reps='8-12', muscle='Chest', notes=None):
    return GeneratedExercise(name=name, muscle_group=muscle, sets=sets, reps=reps,
                             rest_seconds=60, notes=notes)


def program_of(*workouts, name='Test Program'):
    return GeneratedProgram(
        name=name,
        description='',
        days_per_week=len(workouts),
        workouts=[
            GeneratedWorkout(name=w_name, day_number=i + 1, focus='General',
                             exercises=list(exs), estimated_duration=60)
            for i, (w_name, exs) in enumerate(workouts)
        ]
    )


class FakeStores:
    """In-memory catalog and routine store recording every call."""

    def __init__(self, catalog_names=()):
        self.catalog = [CatalogExercise(id=i + 1, name=n) for i, n in enumerate(catalog_names)]
        self.created_exercises = []
        self.routines = []
        self.lookup_calls = 0

    def lookup(self):
        self.lookup_calls += 1
        return list(self.catalog)

    def create_exercise(self, name, muscle_group, exercise_type, instructions, images):
        new = CatalogExercise(id=len(self.catalog) + 1, name=name, muscle_group=muscle_group,
                              type=exercise_type, instructions=instructions, images=images)
        self.catalog.append(new)
        self.created_exercises.append(new)
        return new

    def create_routine(self, name, mappings, program_id):
        routine = RoutineRecord(
            id=len(self.routines) + 100,
            name=name,
            program_id=program_id,
            exercises=[RoutineExercise(m['exercise_id'], m['sets'], m['reps']) for m in mappings]
        )
        self.routines.append(routine)
        return routine

    def run(self, program, timestamp_ms=1700000000000):
        return reconcile(program, self.lookup, self.create_exercise, self.create_routine,
                         timestamp_ms=timestamp_ms)


class TestParseTargetReps(unittest.TestCase):

    def test_range_takes_low_end(self):
        self.assertEqual(parse_target_reps('8-12'), 8)

    def test_bare_number(self):
        self.assertEqual(parse_target_reps('15'), 15)

    def test_range_with_suffix(self):
        self.assertEqual(parse_target_reps('10-12 each'), 10)

    def test_defaults_to_ten(self):
        for text in ('', 'AMRAP', 'to failure', None, '0', '-5'):
            with self.subTest(text=text):
                self.assertEqual(parse_target_reps(text), 10)


class TestGroupingKey(unittest.TestCase):

    def test_format(self):
        self.assertEqual(make_program_grouping_key('Strong 5x5', 1700000000000), 'ai|Strong 5x5|1700000000000')

    def test_delimiter_is_sanitized(self):
        key = make_program_grouping_key('Push|Pull Day', 123)

        self.assertEqual(key.count('|'), 2)
        self.assertEqual(key, 'ai|Push-Pull Day|123')

    def test_every_delimiter_in_name_is_sanitized(self):
        key = make_program_grouping_key('A|B|C', 5)

        self.assertEqual(key, 'ai|A-B-C|5')
        self.assertEqual(key.split('|'), ['ai', 'A-B-C', '5'])

    def test_defaults_to_current_time(self):
        with patch('program_reconciler.time.time', return_value=1700000000.5):
            self.assertEqual(make_program_grouping_key('P'), 'ai|P|1700000000500')

    def test_parse_names(self):
        self.assertEqual(parse_program_grouping_key('ai|Push-Pull Day|123'), 'Push-Pull Day')
        self.assertEqual(parse_program_grouping_key('ai-1699999999'), 'AI Generated Plan')
        self.assertEqual(parse_program_grouping_key('ai|'), 'AI Workout Plan')
        self.assertIsNone(parse_program_grouping_key('bundle-starter'))
        self.assertIsNone(parse_program_grouping_key(None))


class TestCatalogMatching(unittest.TestCase):

    def setUp(self):
        self.catalog = [
            CatalogExercise(id=1, name='Bench'),
            CatalogExercise(id=2, name='Bench Press'),
            CatalogExercise(id=3, name='Squat'),
        ]

    def test_exact_match_beats_earlier_substring(self):
        self.assertEqual(find_catalog_match('bench press', self.catalog).id, 2)

    def test_catalog_name_contained_in_generated(self):
        self.assertEqual(find_catalog_match('Incline Bench', self.catalog).id, 1)

    def test_generated_name_contained_in_catalog(self):
        catalog = [CatalogExercise(id=7, name='Barbell Back Squat')]
        self.assertEqual(find_catalog_match('back squat', catalog).id, 7)

    def test_first_substring_match_in_catalog_order(self):
        catalog = [CatalogExercise(id=5, name='Cable Row'), CatalogExercise(id=6, name='Row')]
        self.assertEqual(find_catalog_match('Seated Cable Row Machine', catalog).id, 5)

    def test_partial_overlap_is_not_a_match(self):
        self.assertIsNone(find_catalog_match('Bent Over Row', self.catalog))

    def test_empty_catalog_names_never_match(self):
        catalog = [CatalogExercise(id=9, name='')]
        self.assertIsNone(find_catalog_match('Deadlift', catalog))

    def test_empty_generated_name_never_matches(self):
        self.assertIsNone(find_catalog_match('', self.catalog))
        self.assertIsNone(find_catalog_match('   ', self.catalog))


class TestReconcile(unittest.TestCase):

    def test_reuses_exact_match(self):
        stores = FakeStores(['Bench Press'])

        routines = stores.run(program_of(('Push', [exercise('Bench Press')])))

        self.assertEqual(stores.created_exercises, [])
        self.assertEqual(routines[0].exercises[0].exercise_id, 1)

    def test_substring_match_reused(self):
        stores = FakeStores(['Bench'])

        routines = stores.run(program_of(('Push', [exercise('Incline Bench')])))

        self.assertEqual(stores.created_exercises, [])
        self.assertEqual(routines[0].exercises[0].exercise_id, 1)

    def test_creates_missing_exercise(self):
        stores = FakeStores(['Squat'])

        stores.run(program_of(('Push', [exercise('Cable Flyes', muscle='Chest', notes='Squeeze at the top')])))

        created = stores.created_exercises[0]
        self.assertEqual(created.name, 'Cable Flyes')
        self.assertEqual(created.muscle_group, 'Chest')
        self.assertEqual(created.type, 'Gym')
        self.assertEqual(created.instructions, ['Squeeze at the top'])
        self.assertEqual(created.images, [])

    def test_created_exercise_without_notes_has_no_instructions(self):
        stores = FakeStores()
        stores.run(program_of(('Push', [exercise('Dips')])))
        self.assertEqual(stores.created_exercises[0].instructions, [])

    def test_duplicate_names_across_workouts_created_once(self):
        stores = FakeStores()
        program = program_of(
            ('Day A', [exercise('Pull-ups'), exercise('Push-ups')]),
            ('Day B', [exercise('pull-ups'), exercise('Push-ups')]),
        )

        routines = stores.run(program)

        self.assertEqual([ex.name for ex in stores.created_exercises], ['Pull-ups', 'Push-ups'])
        self.assertEqual(stores.lookup_calls, 1)
        self.assertEqual(
            [e.exercise_id for e in routines[0].exercises],
            [e.exercise_id for e in routines[1].exercises]
        )

    def test_duplicate_names_within_one_workout_created_once(self):
        stores = FakeStores()

        routines = stores.run(program_of(('Day A', [exercise('Face Pull'), exercise('face pull', sets=2)])))

        self.assertEqual([ex.name for ex in stores.created_exercises], ['Face Pull'])
        ids = [e.exercise_id for e in routines[0].exercises]
        self.assertEqual(len(ids), 2)
        self.assertEqual(ids[0], ids[1])

    def test_routine_mappings(self):
        stores = FakeStores(['Squat'])

        routines = stores.run(program_of(('Legs', [exercise('Squat', sets=5, reps='4-6'),
                                                   exercise('Calf Raise', sets=2, reps='AMRAP')])))

        mapped = routines[0].exercises
        self.assertEqual((mapped[0].target_sets, mapped[0].target_reps), (5, 4))
        self.assertEqual((mapped[1].target_sets, mapped[1].target_reps), (2, 10))

    def test_one_routine_per_workout_with_shared_key(self):
        stores = FakeStores()
        program = program_of(('Push', [exercise('A')]), ('Pull', []), ('Legs', [exercise('B')]),
                             name='Push|Pull')

        routines = stores.run(program, timestamp_ms=42)

        self.assertEqual([r.name for r in routines], ['Push', 'Pull', 'Legs'])
        self.assertEqual({r.program_id for r in routines}, {'ai|Push-Pull|42'})
        self.assertEqual(routines[1].exercises, [])

    def test_existing_catalog_never_modified(self):
        stores = FakeStores(['Bench Press', 'Squat'])
        before = [(e.id, e.name) for e in stores.catalog]

        stores.run(program_of(('Day', [exercise('Bench Press'), exercise('Lunge')])))

        self.assertEqual([(e.id, e.name) for e in stores.catalog[:2]], before)

    def test_routine_failure_keeps_earlier_routines(self):
        stores = FakeStores()
        calls = []

        def flaky_routine(name, mappings, program_id):
            calls.append(name)
            if len(calls) == 2:
                raise RuntimeError('insert rejected')
            return stores.create_routine(name, mappings, program_id)

        program = program_of(('Day 1', [exercise('A')]), ('Day 2', [exercise('B')]), ('Day 3', [exercise('C')]))

        with self.assertRaises(ProgramSaveError) as ctx:
            reconcile(program, stores.lookup, stores.create_exercise, flaky_routine)

        self.assertEqual([r.name for r in ctx.exception.created_routines], ['Day 1'])
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)
        self.assertEqual(calls, ['Day 1', 'Day 2'])

    def test_catalog_create_failure(self):
        stores = FakeStores()
        failing_create = MagicMock(side_effect=RuntimeError('duplicate key'))

        with self.assertRaises(ProgramSaveError) as ctx:
            reconcile(program_of(('Day', [exercise('A')])), stores.lookup, failing_create, stores.create_routine)

        self.assertIn("'A'", str(ctx.exception))
        self.assertEqual(ctx.exception.created_routines, [])

    def test_store_returning_nothing_is_a_failure(self):
        stores = FakeStores()

        with self.assertRaises(ProgramSaveError):
            reconcile(program_of(('Day', [exercise('A')])), stores.lookup,
                      stores.create_exercise, lambda *args: None)

    def test_lookup_failure(self):
        def broken_lookup():
            raise ConnectionError('db down')

        with self.assertRaises(ProgramSaveError):
            reconcile(program_of(('Day', [])), broken_lookup, MagicMock(), MagicMock())


class TestReconcileAndSave(unittest.TestCase):

    @patch('db_routines.create_routine')
    @patch('db.create_exercise')
    @patch('db.get_all_exercises')
    def test_binds_supabase_stores_to_user(self, mock_lookup, mock_create, mock_routine):
        mock_lookup.return_value = [CatalogExercise(id=1, name='Push-ups')]
        mock_create.return_value = CatalogExercise(id=2, name='Plank')
        mock_routine.side_effect = lambda name, mappings, program_id, user_id: RoutineRecord(
            id=10, name=name, program_id=program_id)

        routines = reconcile_and_save(
            program_of(('Core', [exercise('Push-ups'), exercise('Plank', notes='Brace')])), 'user123'
        )

        mock_lookup.assert_called_once_with('user123')
        mock_create.assert_called_once_with('Plank', 'Chest', 'Gym', ['Brace'], [], user_id='user123')
        args = mock_routine.call_args.args
        self.assertEqual(args[0], 'Core')
        self.assertEqual([m['exercise_id'] for m in args[1]], [1, 2])
        self.assertTrue(args[2].startswith('ai|Test Program|'))
        self.assertEqual(args[3], 'user123')
        self.assertEqual(len(routines), 1)


class TestGrouping(unittest.TestCase):

    def test_groups_by_program_id(self):
        routines = [
            RoutineRecord(id=1, name='Push', program_id='ai|PPL|1'),
            RoutineRecord(id=2, name='My Routine', program_id=None),
            RoutineRecord(id=3, name='Pull', program_id='ai|PPL|1'),
            RoutineRecord(id=4, name='Old', program_id='ai-99'),
            RoutineRecord(id=5, name='Bundle', program_id='starter-bundle'),
        ]

        programs, standalone = group_routines_by_program(routines)

        self.assertEqual([p['name'] for p in programs], ['PPL', 'AI Generated Plan', 'Unknown Program'])
        self.assertEqual([r.id for r in programs[0]['routines']], [1, 3])
        self.assertEqual([r.id for r in standalone], [2])


if __name__ == '__main__':
    unittest.main(verbosity=2)
