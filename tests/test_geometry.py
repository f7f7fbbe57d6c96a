import unittest
from types import SimpleNamespace

from mindmotion.geometry import check_visibility, distance, ema, is_visible
from mindmotion.landmarks import Landmark, first_person

from pose_fixtures import make_landmarks


class TestGeometry(unittest.TestCase):

    def test_distance_is_2d_euclidean(self):
        self.assertAlmostEqual(distance(Landmark(0.0, 0.0), Landmark(0.3, 0.4)), 0.5)
        self.assertEqual(distance(Landmark(0.2, 0.2), Landmark(0.2, 0.2)), 0.0)

    def test_missing_visibility_is_trusted(self):
        self.assertTrue(is_visible(Landmark(0.5, 0.5)))
        self.assertTrue(is_visible(SimpleNamespace(x=0.5, y=0.5)))

    def test_visibility_threshold_is_strict(self):
        self.assertFalse(is_visible(Landmark(0.5, 0.5, 0.5)))
        self.assertTrue(is_visible(Landmark(0.5, 0.5, 0.51)))
        self.assertTrue(is_visible(Landmark(0.5, 0.5, 0.35), threshold=0.3))
        self.assertFalse(is_visible(None))

    def test_check_visibility_needs_every_point(self):
        self.assertTrue(check_visibility(Landmark(0, 0), Landmark(0, 0, 0.9)))
        self.assertFalse(check_visibility(Landmark(0, 0), Landmark(0, 0, 0.1)))

    def test_ema_starts_from_first_sample(self):
        self.assertEqual(ema(0.0, 0.3, 0.4), 0.3)

    def test_ema_blends(self):
        self.assertAlmostEqual(ema(0.5, 1.0, 0.4), 0.7)


class TestFirstPerson(unittest.TestCase):

    def test_none_and_empty(self):
        self.assertIsNone(first_person(None))
        self.assertIsNone(first_person([]))
        self.assertIsNone(first_person(SimpleNamespace(pose_landmarks=[])))
        self.assertIsNone(first_person(SimpleNamespace(pose_landmarks=None)))

    def test_plain_sequence_of_persons(self):
        person = make_landmarks()
        self.assertIs(first_person([person, make_landmarks()]), person)

    def test_tasks_result(self):
        person = make_landmarks()
        self.assertIs(first_person(SimpleNamespace(pose_landmarks=[person])), person)

    def test_legacy_solutions_result(self):
        person = make_landmarks()
        result = SimpleNamespace(pose_landmarks=SimpleNamespace(landmark=person))
        self.assertIs(first_person(result), person)


if __name__ == '__main__':
    unittest.main()
