import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import cv_analyzer.main  # noqa: F401
from cv_analyzer.analysis import get_default_rubric
from cv_analyzer.services.cv_analysis import evaluate_cv


class PipelineSmokeTests(unittest.TestCase):
    def test_safe_imports_and_default_rubric(self):
        evaluation = evaluate_cv("Skills: Python", get_default_rubric())
        self.assertEqual(evaluation.keywords.matched, 1)
        self.assertTrue(evaluation.structure.checks["skills"])


if __name__ == "__main__":
    unittest.main()
