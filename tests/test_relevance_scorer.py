import unittest

from app.services.processing.keywords import DEFAULT_KEYWORD_CATEGORIES, KeywordCategory
from app.services.processing.scorer import RelevanceScorer, ScoringConfig


def make_scorer(**categories):
    return RelevanceScorer(ScoringConfig(categories=categories))


class TestRelevanceScorer(unittest.TestCase):
    def setUp(self):
        self.scorer = make_scorer(
            hardware=KeywordCategory(weight=4, keywords=("quantum", "qubit")),
            supply=KeywordCategory(weight=2, keywords=("chip",)),
        )

    def test_no_match_scores_minimum(self):
        self.assertEqual(self.scorer.score("Weekend weather update"), 1)
        self.assertEqual(self.scorer.score(""), 1)

    def test_weighted_total_is_compressed(self):
        # 2 * 4 + 1 * 2 = 10 -> ceil(10 / 3) = 4
        breakdown = self.scorer.breakdown("Quantum startup shows qubit chip")
        self.assertEqual(breakdown.weighted_total, 10)
        self.assertEqual(breakdown.components, {"hardware": 8, "supply": 2})
        self.assertEqual(breakdown.score, 4)

    def test_small_total_rounds_up(self):
        self.assertEqual(self.scorer.score("new chip"), 1)
        self.assertEqual(self.scorer.score("quantum"), 2)

    def test_matching_is_case_insensitive(self):
        self.assertEqual(self.scorer.score("QUANTUM"), self.scorer.score("quantum"))

    def test_repeated_keyword_counts_once(self):
        self.assertEqual(self.scorer.score("quantum quantum quantum"), 2)

    def test_duplicate_phrases_in_category_count_once(self):
        scorer = make_scorer(hardware=KeywordCategory(weight=4, keywords=("quantum", "Quantum")))
        self.assertEqual(scorer.breakdown("quantum").weighted_total, 4)

    def test_score_is_capped(self):
        scorer = make_scorer(big=KeywordCategory(weight=10, keywords=("alpha", "beta")))
        self.assertEqual(scorer.score("alpha beta"), 5)

    def test_score_candidate_uses_title_and_snippet(self):
        self.assertEqual(self.scorer.score_candidate("quantum", "qubit"), 3)
        self.assertEqual(self.scorer.score_candidate("quantum", None), 2)

    def test_default_table_weights(self):
        self.assertEqual(DEFAULT_KEYWORD_CATEGORIES["companies"].weight, 4)
        self.assertEqual(DEFAULT_KEYWORD_CATEGORIES["primary_ai"].weight, 3)
        self.assertEqual(DEFAULT_KEYWORD_CATEGORIES["geopolitics"].weight, 3)
        self.assertEqual(DEFAULT_KEYWORD_CATEGORIES["research"].weight, 2)

    def test_company_mention_clears_default_floor(self):
        self.assertGreaterEqual(RelevanceScorer().score("OpenAI ships a new model"), 2)


if __name__ == "__main__":
    unittest.main()
