import os
import tempfile
import unittest
from unittest.mock import MagicMock

from cv_analyzer.analysis import get_default_rubric
from cv_analyzer.analysis.annotate import render_missing_section
from cv_analyzer.services.cv_analysis import (
    ATS_APPROVED_STATUS,
    ATS_NOT_APPROVED_STATUS,
    FAIL_FEEDBACK,
    PASS_FEEDBACK,
    analyze_cv,
)
from cv_analyzer.storage import CVStoreError, SqliteCVStore

COMPLETE_CV = (
    "Jane Doe\n"
    "Contact: jane@example.com\n"
    "Summary\n"
    "UX/UI designer who loves web development.\n"
    "Experience\n"
    "- Python, Node.js, React.js, Vue.js, Polymer, Lit Element\n"
    "Education\n"
    "B.Sc. Computer Science\n"
    "Skills\n"
    "- PostgreSQL, Docker, Agile development\n"
    "Projects\n"
    "- Open source job board\n"
)


class AnalyzeCVTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.store = SqliteCVStore(os.path.join(self.tmp_dir.name, "cvs.db"))
        self.rubric = get_default_rubric()

    def tearDown(self):
        self.store.close()
        self.tmp_dir.cleanup()

    async def _analyze(self, text: str, filename: str = "resume.txt"):
        return await analyze_cv(text, user_id="user-1", filename=filename, store=self.store, rubric=self.rubric)

    async def test_text_without_keywords_or_sections(self):
        response = await self._analyze("Hello world\nI like gardening and cooking.")
        self.assertEqual(response.score, "0.00")
        self.assertEqual(response.structure_score, "0.00")
        self.assertEqual(response.results.overall_score, "0.00")
        self.assertFalse(response.results.is_ats_approved)
        self.assertEqual(response.results.missing_keywords, list(self.rubric.keywords))
        self.assertEqual(response.results.missing_sections, list(self.rubric.section_ids))
        self.assertEqual(response.ats_status, ATS_NOT_APPROVED_STATUS)
        self.assertTrue(response.failed_checks)
        self.assertEqual(response.feedback, FAIL_FEEDBACK)

    async def test_complete_cv(self):
        response = await self._analyze(COMPLETE_CV)
        self.assertEqual(response.score, "100.00")
        self.assertEqual(response.structure_score, "100.00")
        self.assertEqual(response.results.overall_score, "100.00")
        self.assertTrue(response.results.is_ats_approved)
        self.assertEqual(response.results.missing_keywords, [])
        self.assertEqual(response.results.missing_sections, [])
        self.assertEqual(response.results.total_keywords, 11)
        self.assertEqual(response.results.matched_keywords, 11)
        self.assertTrue(all(response.results.structure_checks.values()))
        self.assertNotIn("ats-warning", response.issues_highlighted)
        self.assertIn("ats-success", response.issues_highlighted)
        self.assertEqual(response.ats_status, ATS_APPROVED_STATUS)
        self.assertFalse(response.failed_checks)
        self.assertEqual(response.feedback, PASS_FEEDBACK)

    async def test_missing_projects_section(self):
        text = COMPLETE_CV.replace("Projects\n- Open source job board\n", "")
        response = await self._analyze(text)
        self.assertEqual(response.score, "100.00")
        self.assertEqual(response.structure_score, "83.33")
        self.assertEqual(response.results.overall_score, "91.67")
        self.assertEqual(response.results.missing_sections, ["projects"])
        self.assertFalse(response.results.structure_checks["projects"])
        self.assertTrue(response.results.is_ats_approved)
        self.assertTrue(response.failed_checks)
        self.assertTrue(response.issues_highlighted.endswith(render_missing_section(self.rubric.sections[-1])))
        self.assertEqual(response.issues_highlighted.count("ats-missing-section"), 1)

    async def test_empty_text(self):
        response = await self._analyze("")
        self.assertEqual(response.score, "0.00")
        self.assertEqual(response.structure_score, "0.00")
        self.assertFalse(response.results.is_ats_approved)
        expected = "".join(render_missing_section(section) for section in self.rubric.sections)
        self.assertEqual(response.issues_highlighted, expected)

    async def test_record_is_persisted_and_id_returned(self):
        response = await self._analyze(COMPLETE_CV, filename="jane.txt")
        record = self.store.get(response.results.cv_id)
        self.assertIsNotNone(record)
        self.assertEqual(record.filename, "jane.txt")
        self.assertEqual(record.user_id, "user-1")
        self.assertEqual(record.content, COMPLETE_CV)
        self.assertEqual(response.results.filename, "jane.txt")

    async def test_payload_uses_camel_case_keys(self):
        payload = (await self._analyze(COMPLETE_CV)).model_dump(by_alias=True)
        self.assertEqual(
            set(payload),
            {
                "message",
                "score",
                "structureScore",
                "results",
                "issuesHighlighted",
                "atsStatus",
                "failedChecks",
                "feedback",
            },
        )
        self.assertIn("isATSApproved", payload["results"])
        self.assertIn("cvId", payload["results"])
        self.assertEqual(payload["message"], "CV analysis complete.")

    async def test_store_failure_aborts_analysis(self):
        store = MagicMock()
        store.create.side_effect = CVStoreError("disk full")
        with self.assertRaises(CVStoreError):
            await analyze_cv(COMPLETE_CV, user_id="user-1", filename="cv.txt", store=store, rubric=self.rubric)
        store.create.assert_called_once_with("user-1", "cv.txt", COMPLETE_CV)


if __name__ == "__main__":
    unittest.main()
