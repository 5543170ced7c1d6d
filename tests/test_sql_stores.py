import unittest
from datetime import datetime, timedelta
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from workout_engine.crud.exercise import SqlExerciseCatalog
from workout_engine.crud.generation_request import SqlGenerationRequestStore
from workout_engine.crud.workout_blueprint import SqlBlueprintStore
from workout_engine.database import Base, init_db
from workout_engine.models.exercise import Exercise
from workout_engine.models.workout_blueprint import WorkoutBlueprint

# Use an in-memory SQLite DB
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

T0 = datetime(2026, 3, 1, 8, 0, 0)
ROUTINE = {"id": "r-1", "name": "Routine", "exercises": [{"exerciseId": "ex-1", "orderIndex": 0, "sets": 3}]}


class SqlStoreTestCase(unittest.TestCase):

    def setUp(self):
        init_db(bind=engine)
        self.db = TestingSessionLocal()

    def tearDown(self):
        self.db.close()
        Base.metadata.drop_all(bind=engine)


class TestSqlExerciseCatalog(SqlStoreTestCase):

    def setUp(self):
        super().setUp()
        rows = [
            ("ex-b", "Bench Press", "Chest", "barbell", True),
            ("ex-a", "Air Squat", "Legs", None, True),
            ("ex-h", "Hidden Drill", "Core", "bodyweight", False),
        ]
        for i, (ex_id, name, group, equipment, public) in enumerate(rows):
            self.db.add(Exercise(
                id=ex_id, name=name, muscle_group=group, equipment=equipment,
                is_public=public, created_at=T0 + timedelta(minutes=i),
            ))
        self.db.commit()
        self.catalog = SqlExerciseCatalog(self.db)

    def test_public_only_in_creation_order(self):
        self.assertEqual([e.id for e in self.catalog.list_exercises()], ["ex-b", "ex-a"])

    def test_all_exercises(self):
        self.assertEqual(len(self.catalog.list_exercises(public_only=False)), 3)

    def test_get_by_ids(self):
        found = self.catalog.get_exercises_by_ids(["ex-a", "ex-h", "missing"])
        self.assertEqual(sorted(e.id for e in found), ["ex-a", "ex-h"])
        self.assertEqual(self.catalog.get_exercises_by_ids([]), [])


class TestSqlBlueprintStore(SqlStoreTestCase):

    def setUp(self):
        super().setUp()
        self.store = SqlBlueprintStore(self.db)

    def test_save_creates_with_usage_one(self):
        blueprint_id = self.store.save("a" * 64, ROUTINE, T0)
        blueprint = self.store.get_by_spec_hash("a" * 64)

        self.assertEqual(blueprint.id, blueprint_id)
        self.assertEqual(blueprint.usage_count, 1)
        self.assertEqual(blueprint.routine_data, ROUTINE)
        self.assertEqual(blueprint.created_at, T0)
        self.assertEqual(blueprint.last_used_at, T0)

    def test_save_overwrites_existing_hash(self):
        first_id = self.store.save("a" * 64, ROUTINE, T0)
        new_routine = dict(ROUTINE, id="r-2")
        second_id = self.store.save("a" * 64, new_routine, T0 + timedelta(hours=1))

        self.assertEqual(first_id, second_id)
        blueprint = self.store.get_by_spec_hash("a" * 64)
        self.assertEqual(blueprint.routine_data["id"], "r-2")
        self.assertEqual(blueprint.usage_count, 2)
        self.assertEqual(self.db.query(WorkoutBlueprint).count(), 1)

    def test_touch_usage(self):
        blueprint_id = self.store.save("b" * 64, ROUTINE, T0)
        self.store.touch_usage(blueprint_id, T0 + timedelta(days=1))
        self.store.touch_usage(blueprint_id, T0 + timedelta(days=2))

        blueprint = self.store.get_by_spec_hash("b" * 64)
        self.assertEqual(blueprint.usage_count, 3)
        self.assertEqual(blueprint.last_used_at, T0 + timedelta(days=2))

    def test_touch_unknown_blueprint_is_noop(self):
        self.store.touch_usage("missing", T0)

    def test_spec_hash_is_unique(self):
        self.db.add(WorkoutBlueprint(spec_hash="c" * 64, routine_data=ROUTINE, usage_count=1))
        self.db.commit()
        self.db.add(WorkoutBlueprint(spec_hash="c" * 64, routine_data=ROUTINE, usage_count=1))
        with self.assertRaises(IntegrityError):
            self.db.commit()
        self.db.rollback()

    def test_save_coalesces_onto_concurrent_insert(self):
        spec_hash = "9" * 64
        real_lookup = self.store.get_by_spec_hash
        lookups = []

        def lookup_after_other_writer(value):
            lookups.append(value)
            if len(lookups) == 1:
                # Another worker inserts the same hash between our lookup and our insert
                other = TestingSessionLocal()
                other.add(WorkoutBlueprint(
                    id="winner", spec_hash=value, routine_data=ROUTINE,
                    usage_count=1, created_at=T0, last_used_at=T0,
                ))
                other.commit()
                other.close()
                return None
            return real_lookup(value)

        new_routine = dict(ROUTINE, id="r-late")
        with patch.object(self.store, "get_by_spec_hash", side_effect=lookup_after_other_writer):
            blueprint_id = self.store.save(spec_hash, new_routine, T0 + timedelta(minutes=5))

        self.assertEqual(blueprint_id, "winner")
        self.assertEqual(len(lookups), 2)
        rows = self.db.query(WorkoutBlueprint).filter(WorkoutBlueprint.spec_hash == spec_hash).all()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].routine_data["id"], "r-late")
        self.assertEqual(rows[0].usage_count, 2)
        self.assertEqual(rows[0].last_used_at, T0 + timedelta(minutes=5))

    def test_list_recent_newest_first_with_total(self):
        for i, char in enumerate("defg"):
            self.store.save(char * 64, ROUTINE, T0 + timedelta(hours=i))

        page, total = self.store.list_recent(limit=2, offset=0)
        self.assertEqual(total, 4)
        self.assertEqual([b.spec_hash[0] for b in page], ["g", "f"])

        page, _ = self.store.list_recent(limit=2, offset=2)
        self.assertEqual([b.spec_hash[0] for b in page], ["e", "d"])

        page, total = self.store.list_recent(limit=10, offset=0, spec_hash="e" * 64)
        self.assertEqual(total, 1)
        self.assertEqual(page[0].spec_hash, "e" * 64)


class TestSqlGenerationRequestStore(SqlStoreTestCase):

    def setUp(self):
        super().setUp()
        self.store = SqlGenerationRequestStore(self.db)

    def record(self, request_id, user_id="user-1", key=None, created_at=T0):
        return {
            "id": request_id,
            "user_id": user_id,
            "spec_hash": "f" * 64,
            "request_data": {"fitnessLevel": "beginner"},
            "idempotency_key": key,
            "status": "processing",
            "created_at": created_at,
        }

    def test_create_and_update(self):
        self.store.create(self.record("req-1"))
        self.store.update("req-1", {"status": "failed", "error": "boom", "completed_at": T0})

        row = self.store.get("req-1")
        self.assertEqual(row.status, "failed")
        self.assertEqual(row.error, "boom")
        self.assertEqual(row.request_data, {"fitnessLevel": "beginner"})

    def test_update_missing_raises(self):
        with self.assertRaises(LookupError):
            self.store.update("missing", {"status": "completed"})

    def test_list_by_idempotency_key_oldest_first(self):
        self.store.create(self.record("req-2", key="k1", created_at=T0 + timedelta(seconds=5)))
        self.store.create(self.record("req-1", key="k1", created_at=T0))
        self.store.create(self.record("req-3", key="other"))

        rows = self.store.list_by_idempotency_key("k1")
        self.assertEqual([r.id for r in rows], ["req-1", "req-2"])
        self.assertEqual(self.store.list_by_idempotency_key("unused"), [])


if __name__ == '__main__':
    unittest.main()
