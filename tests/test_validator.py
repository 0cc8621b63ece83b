import unittest

from app.services.collectors.base import RawCandidate
from app.services.processing.validator import CandidateValidator, TitleRules

GOOD_TITLE = "Chipmaker unveils a new accelerator for training"


def candidate(title=GOOD_TITLE, url="https://example.com/story"):
    return RawCandidate(title=title, url=url, source_name="Test")


class TestCandidateValidator(unittest.TestCase):
    def setUp(self):
        self.validator = CandidateValidator()

    def test_accepts_reasonable_headline(self):
        result = self.validator.validate(candidate())
        self.assertTrue(result.is_valid)
        self.assertEqual(result.issues, [])

    def test_rejects_short_and_long_titles(self):
        self.assertFalse(self.validator.validate(candidate("Too short")).is_valid)
        self.assertFalse(self.validator.validate(candidate("x" * 121)).is_valid)

    def test_length_bounds_are_inclusive(self):
        self.assertTrue(self.validator.validate(candidate("a" * 20)).is_valid)
        self.assertTrue(self.validator.validate(candidate("a" * 120)).is_valid)

    def test_rejects_clickbait(self):
        result = self.validator.validate(candidate("You won't believe what this model can do"))
        self.assertFalse(result.is_valid)
        self.assertIn("Clickbait phrase", result.issues[0])

        result = self.validator.validate(candidate("Major model launch happening today!!!"))
        self.assertFalse(result.is_valid)

    def test_rejects_non_http_urls(self):
        self.assertFalse(self.validator.validate(candidate(url="ftp://example.com/file")).is_valid)
        self.assertFalse(self.validator.validate(candidate(url="example.com/story")).is_valid)

    def test_missing_title(self):
        result = self.validator.validate(candidate(title="  "))
        self.assertEqual(result.issues, ["Missing title"])

    def test_custom_rules(self):
        validator = CandidateValidator(TitleRules(min_length=5, blacklisted_phrases=("rumor",)))
        self.assertTrue(validator.validate(candidate("Short one")).is_valid)
        self.assertFalse(validator.validate(candidate("Rumor: big launch soon")).is_valid)


if __name__ == "__main__":
    unittest.main()
