"""
Unit tests for the resume, cover letter and bio helpers.
Tests data normalization, the download renderers and bio analytics.
"""
import json
import datetime as dt

import pytest

from vgen.services import bio, cover_letter, resume


RESUME = {
    "personalInfo": {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "github": "github.com/ada",
    },
    "experience": [
        {"company": "Analytical Co", "position": "Engineer", "startDate": "2019", "endDate": "2021",
         "description": ["Built engines", "Wrote notes"]},
    ],
    "education": [{"institution": "London", "degree": "BSc", "fieldOfStudy": "Maths", "gpa": "3.9"}],
    "skills": {"technical": "Python", "soft": ["Writing"], "hobbies": ["Chess"]},
    "languages": [{"language": "French"}],
}


class TestFormatResumeData:
    def test_normalizes_fields(self):
        data = resume.format_resume_data(RESUME)
        assert data["personalInfo"]["fullName"] == "Ada Lovelace"
        assert data["personalInfo"]["phone"] == ""
        assert data["experience"][0]["description"] == "Built engines\nWrote notes"
        assert data["experience"][0]["current"] is False
        assert data["skills"] == {"technical": ["Python"], "soft": ["Writing"]}
        assert data["languages"] == [{"language": "French", "proficiency": "Intermediate"}]
        assert data["projects"] == []

    def test_empty_input(self):
        data = resume.format_resume_data({})
        assert data["personalInfo"]["fullName"] == ""
        assert data["experience"] == []
        assert data["skills"] == {}


class TestRenderResume:
    def test_markdown_sections(self):
        text = resume.render_resume(RESUME, "markdown")
        assert text.startswith("# Ada Lovelace\n\n")
        assert "github.com/ada" in text
        assert "### Engineer\n**Analytical Co**" in text
        assert "2019 - 2021" in text
        assert "### BSc in Maths\n**London**" in text
        assert " | GPA: 3.9" in text
        assert "**Technical:** Python" in text
        assert "- French - Intermediate" in text
        assert "## Projects" not in text

    def test_html_escapes_values(self):
        data = {**RESUME, "personalInfo": {**RESUME["personalInfo"], "firstName": "<Ada>"}}
        html = resume.render_resume(data, "html")
        assert "<h1>&lt;Ada&gt; Lovelace</h1>" in html
        assert '<span class="skill-tag">Python</span>' in html
        assert "<title>&lt;Ada&gt; Lovelace - Resume</title>" in html

    def test_json(self):
        assert json.loads(resume.render_resume(RESUME, "json")) == RESUME

    def test_generated_text_only(self):
        assert resume.render_resume({"resume": "Plain text"}, "markdown") == "Plain text"
        assert "<pre>a &amp; b</pre>" in resume.render_resume({"resume": "a & b"}, "html")

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            resume.render_resume(RESUME, "pdf")


class TestCoverLetter:
    def test_long_date_has_no_padding(self):
        assert cover_letter.long_date(dt.date(2025, 1, 5)) == "January 5, 2025"

    def test_render_html(self):
        html = cover_letter.render_html(
            "Dear team,\n\nI am <keen>.\n\n\n",
            {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "location": "London"},
            today=dt.date(2025, 3, 9),
        )
        assert html.count('<p class="paragraph">') == 2
        assert "I am &lt;keen&gt;." in html
        assert "Ada Lovelace<br>ada@example.com<br>London" in html
        assert '<div class="date">March 9, 2025</div>' in html

    def test_render_text(self):
        assert cover_letter.render_cover_letter({"coverLetter": "Hello"}) == "Hello"
        with pytest.raises(ValueError):
            cover_letter.render_cover_letter({"coverLetter": "Hello"}, "pdf")

    def test_format_resume_for_cover_letter(self):
        condensed = cover_letter.format_resume_for_cover_letter({
            **RESUME,
            "experience": [{"position": f"P{i}", "company": "C", "current": i == 0} for i in range(5)],
            "skills": {"technical": list("abcdefg"), "soft": ["x", "y", "z", "w"]},
        })
        assert condensed["name"] == "Ada Lovelace"
        assert len(condensed["experience"]) == 3
        assert condensed["experience"][0]["duration"] == " - Present"
        assert condensed["skills"] == ["a", "b", "c", "d", "e", "x", "y", "z"]
        assert condensed["education"] == [{"degree": "BSc", "field": "Maths", "institution": "London"}]


class TestBioAnalytics:
    def test_counts(self):
        assert bio.word_count("one two  three") == 4  # double space counts an empty word
        assert bio.sentence_count("Hi. I build things! Really?") == 3
        assert bio.sentence_count("no terminator") == 0

    def test_readability_bounds(self):
        assert bio.readability_score("no sentence end") == 100
        assert 0 <= bio.readability_score("Extraordinarily multidimensional conceptualization.") <= 100

    def test_keyword_density(self):
        density = bio.keyword_density("Python developer. Python mentor. Loves Python")
        assert density["totalWords"] == 6
        assert density["topKeywords"][0] == {"word": "python", "count": 3, "density": "50.00"}

    def test_hashtags_for_designer(self):
        tags = bio.hashtag_suggestions(
            {"skills": {"technical": ["UI Design", "Figma"]}, "experience": [{"position": "Product Designer"}]},
            "twitter",
        )
        assert tags == ["#UIDesign", "#Figma", "#ProductDesigner", "#Design", "#Creativity"]

    def test_hashtags_instagram_limit(self):
        skills = {"technical": ["Alpha", "Bravo", "Charlie", "Delta", "Echo", "Foxtrot"]}
        tags = bio.hashtag_suggestions({"skills": skills}, "instagram")
        assert tags[:5] == ["#Alpha", "#Bravo", "#Charlie", "#Delta", "#Echo"]
        assert tags[5:] == ["#Professional", "#Career"]

    def test_twitter_length_suggestion(self):
        analytics = bio.analyze_bio("x " * 100, "twitter")
        assert analytics["isWithinLimit"] is False
        assert "Twitter bio exceeds 160 characters. Consider shortening for better visibility." in analytics["suggestions"]
