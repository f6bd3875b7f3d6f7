"""
Unit tests for services.ats module.
Tests each scoring category, the keyword matcher and the combined score.
"""
import pytest

from vgen.services.ats import (
    assess_content,
    assess_formatting,
    assess_keywords,
    assess_skills_section,
    assess_structure,
    calculate_ats_score,
    feedback_for,
    grade_for,
    important_job_words,
    js_round,
)


STRONG_RESUME = "\n".join(
    [
        "Ada Lovelace",
        "Email: ada@example.com | linkedin.com/in/ada",
        "",
        "SUMMARY",
        "Engineer focused on analytics platform strategy.",
        "",
        "EXPERIENCE",
        "• Led migration of the billing platform, serving 2 million users",
        "• Improved API latency by 40%",
        "• Built and delivered a data framework",
        "• Developed reporting dashboards",
        "• Designed the event pipeline",
        "• Implemented CI for 12 projects",
        "• Optimized database queries",
        "Jan 2020 - Present",
        "",
        "EDUCATION",
        "BSc Mathematics, 2016",
        "",
        "Skills: Python, SQL, Docker, AWS, Git, leadership, communication, teamwork",
        "",
    ]
    + [f"Detail line {i}" for i in range(10)]
)


class TestJsRound:
    @pytest.mark.parametrize("value, expected", [(2.5, 3), (3.5, 4), (2.4, 2), (0.5, 1), (-2.5, -3)])
    def test_half_rounds_away_from_zero(self, value, expected):
        assert js_round(value) == expected


class TestFormatting:
    def test_plain_text_gets_font_points_only(self):
        # Tabs and no headings: only the assumed-fonts point
        assert assess_formatting("one\ttwo") == 5

    def test_strong_resume_maxes_out(self):
        assert assess_formatting(STRONG_RESUME) == 25

    def test_wide_spacing_loses_points(self):
        assert assess_formatting("EXPERIENCE    2019") == 10


class TestKeywords:
    def test_no_job_description_is_neutral(self):
        assert assess_keywords("anything") == 15

    def test_job_description_without_important_words_scores_zero(self):
        assert assess_keywords("anything", "a job at our firm") == 0

    def test_important_job_words_filter(self):
        words = important_job_words("Building scalable backend systems with Python and engineering rigour")
        assert "building" in words
        assert "scalable" in words
        assert "engineering" in words
        assert "with" not in words
        assert "python" not in words  # six letters, no marker suffix

    def test_match_ratio(self):
        job = "building scalable services"
        assert assess_keywords("I enjoy building things", job) == js_round(1 / 3 * 25)
        assert assess_keywords("building scalable services daily", job) == 25


class TestStructureContentSkills:
    def test_structure(self):
        assert assess_structure("") == 0
        assert assess_structure(STRONG_RESUME) == 20

    def test_content(self):
        assert assess_content("nothing to see") == 0
        assert assess_content(STRONG_RESUME) == 15

    def test_skills_section(self):
        assert assess_skills_section("no such heading") == 0
        assert assess_skills_section("Skills: Python, SQL, Docker, AWS, Git, leadership, communication") == 15


class TestGradesAndFeedback:
    @pytest.mark.parametrize("score, grade", [(95, "A"), (90, "A"), (85, "B"), (70, "C"), (60, "D"), (59, "F")])
    def test_grade_for(self, score, grade):
        assert grade_for(score) == grade

    def test_feedback_thresholds(self):
        assert feedback_for("formatting", 25) == "Excellent formatting for ATS compatibility"
        assert feedback_for("formatting", 12) == "Moderate formatting issues that may affect ATS parsing"
        assert feedback_for("skills", 0) == "Skills section is inadequate or missing important skills"


class TestCalculateAtsScore:
    def test_total_is_sum_of_categories(self):
        result = calculate_ats_score(STRONG_RESUME)
        assert result["overallScore"] == sum(d["score"] for d in result["details"].values())
        assert result["score"] == result["overallScore"]
        assert result["maxScore"] == 100

    def test_strong_resume(self):
        result = calculate_ats_score(STRONG_RESUME)
        assert result["details"]["keywords"]["score"] == 15
        assert result["overallScore"] == 90
        assert result["grade"] == "A"
        assert result["recommendations"] == ["Incorporate more keywords from the job description"]

    def test_empty_resume(self):
        result = calculate_ats_score("", "")
        assert result["grade"] == "F"
        assert len(result["recommendations"]) == 5

    def test_caps_per_category(self):
        result = calculate_ats_score(STRONG_RESUME * 3)
        for detail in result["details"].values():
            assert detail["score"] <= detail["maxScore"]

    def test_identical_input_gives_identical_score(self):
        job = "Backend engineer with Python, Docker and AWS experience building analytics platforms"
        runs = [calculate_ats_score("".join(list(STRONG_RESUME)), job) for _ in range(3)]
        for run in runs:
            run.pop("lastUpdated")
        assert runs[0] == runs[1] == runs[2]
