import pytest

from vgen.services.file_text import MAX_UPLOAD_BYTES


pytestmark = pytest.mark.asyncio


RESUME_TEXT = (
    "Ada Lovelace\nEmail: ada@example.com\n\nEXPERIENCE\n"
    "Led a team of 5 engineers and improved throughput by 30%.\n\n"
    "EDUCATION\nUniversity of London, 1835\n\n"
    "SKILLS: Python, SQL, Docker, leadership, communication\n"
)

JOB = "Platform engineer running Kubernetes clusters and Python services in production."

ANALYSIS = {
    "overallScore": "82%",
    "strengths": ["Quantified results"],
    "weaknesses": ["Short summary"],
    "sectionAnalysis": {"experience": {"score": 80, "feedback": "Solid"}},
}
KEYWORDS = {"missingKeywords": ["kubernetes"], "optimizationTips": ["Mirror the posting"]}
SKILLS = {"technical": ["Python", "SQL"], "soft": ["Leadership"], "tools": ["Docker"]}


async def test_analyze_merges_model_and_ats_results(client, headers, ai, store, user):
    ai.queue(ANALYSIS, KEYWORDS, SKILLS)
    resp = await client.post(
        "/api/analyzer/analyze",
        json={"resumeText": RESUME_TEXT, "industry": "technology", "experienceLevel": "senior"},
        headers=headers,
    )
    data = resp.json()["data"]
    analysis = data["analysis"]
    assert resp.status_code == 200
    assert data["textLength"] == len(RESUME_TEXT)
    assert analysis["overallScore"] == 82
    assert analysis["sectionAnalysis"]["experience"]["score"] == 80
    assert 0 <= analysis["atsScore"]["overallScore"] <= 100
    assert analysis["atsScore"]["details"]["keywords"]["score"] == 15
    assert analysis["keywordOptimization"]["missingKeywords"] == ["kubernetes"]
    assert analysis["skills"]["totalSkills"] == 4
    assert analysis["experienceLevel"] == "senior"
    assert len(ai.prompts) == 3
    assert (await store.users.get_by_id(user.id)).subscription.usage_count == 1


async def test_analyze_requires_resume_text(client, headers, ai):
    resp = await client.post("/api/analyzer/analyze", json={"industry": "technology"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Either resume text or file must be provided"
    assert ai.prompts == []


async def test_analyze_rejects_short_text(client, headers):
    resp = await client.post("/api/analyzer/analyze", json={"resumeText": "too short"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["details"][0]["path"] == "resumeText"


async def test_analyze_invalid_model_reply(client, headers, ai, store, user):
    ai.queue({"strengths": ["no score"]})
    resp = await client.post("/api/analyzer/analyze", json={"resumeText": RESUME_TEXT}, headers=headers)
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to analyze resume. Please try again."
    assert (await store.users.get_by_id(user.id)).subscription.usage_count == 0


async def test_analyze_text_file(client, headers, ai):
    ai.queue(ANALYSIS, KEYWORDS, SKILLS)
    resp = await client.post(
        "/api/analyzer/analyze-file",
        files={"resume": ("resume.txt", RESUME_TEXT.encode(), "text/plain")},
        data={"industry": "technology"},
        headers=headers,
    )
    data = resp.json()["data"]
    assert resp.status_code == 200
    assert data["filename"] == "resume.txt"
    assert data["fileSize"] == len(RESUME_TEXT.encode())
    assert "Ada Lovelace" in ai.prompts[0]


async def test_analyze_file_rejects_legacy_doc(client, headers, ai):
    resp = await client.post(
        "/api/analyzer/analyze-file",
        files={"resume": ("resume.doc", b"binary", "application/msword")},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid file type. Only PDF, TXT, DOC, and DOCX files are allowed."
    assert ai.prompts == []


async def test_analyze_file_rejects_unknown_type(client, headers):
    resp = await client.post(
        "/api/analyzer/analyze-file",
        files={"resume": ("photo.png", b"\x89PNG", "image/png")},
        headers=headers,
    )
    assert resp.status_code == 400


async def test_analyze_file_too_large(client, headers):
    resp = await client.post(
        "/api/analyzer/analyze-file",
        files={"resume": ("resume.txt", b"a" * (MAX_UPLOAD_BYTES + 1), "text/plain")},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "File too large. Maximum size is 5MB."


async def test_analyze_empty_file(client, headers):
    resp = await client.post(
        "/api/analyzer/analyze-file",
        files={"resume": ("resume.txt", b"   \n", "text/plain")},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "No text could be extracted from the file"


async def test_ats_score(client, headers, ai):
    resp = await client.post("/api/analyzer/ats-score", json={"resumeText": RESUME_TEXT}, headers=headers)
    score = resp.json()["data"]["atsScore"]
    assert resp.status_code == 200
    assert score["maxScore"] == 100
    assert score["overallScore"] == sum(d["score"] for d in score["details"].values())
    assert score["grade"] in {"A", "B", "C", "D", "F"}
    assert ai.prompts == []


async def test_industries_and_tips(client):
    industries = (await client.get("/api/analyzer/industries")).json()["data"]
    tips = (await client.get("/api/analyzer/ats-tips")).json()["data"]
    assert industries["total"] == 8
    assert tips["categories"] == ["formatting", "content", "structure", "commonMistakes"]
    assert tips["totalTips"] == 21


async def test_keyword_optimization(client, headers, ai):
    ai.queue(KEYWORDS)
    resp = await client.post(
        "/api/analyzer/keyword-optimization",
        json={"resumeText": RESUME_TEXT, "jobDescription": JOB},
        headers=headers,
    )
    optimization = resp.json()["data"]["optimization"]
    assert optimization["missingKeywords"] == ["kubernetes"]
    assert optimization["recommendedAdditions"] == []


async def test_compare_resumes_ranks_by_score(client, headers, ai, store, user):
    ai.queue({"overallScore": 60}, {"overallScore": 90, "strengths": ["Depth"]})
    resp = await client.post(
        "/api/analyzer/compare-resumes",
        json={"resumes": ["first resume", "second resume"], "jobDescription": JOB},
        headers=headers,
    )
    comparison = resp.json()["data"]["comparison"]
    assert resp.status_code == 200
    assert [r["resumeIndex"] for r in comparison["rankings"]] == [1, 0]
    assert comparison["rankings"][0]["strengths"] == ["Depth"]
    assert comparison["strengths"] == {}
    assert (await store.users.get_by_id(user.id)).subscription.usage_count == 1


async def test_compare_resumes_bounds(client, headers):
    resp = await client.post(
        "/api/analyzer/compare-resumes",
        json={"resumes": ["only one"], "jobDescription": JOB},
        headers=headers,
    )
    assert resp.status_code == 400


async def test_extract_skills_counts_total(client, headers, ai):
    ai.queue({**SKILLS, "totalSkills": "number"})
    resp = await client.post("/api/analyzer/extract-skills", json={"resumeText": RESUME_TEXT}, headers=headers)
    skills = resp.json()["data"]["skills"]
    assert skills["totalSkills"] == 4
    assert skills["languages"] == []


@pytest.mark.parametrize(
    "path, body, field",
    [
        ("/api/analyzer/ats-score", {"resumeText": "x"}, "resumeText"),
        ("/api/analyzer/extract-skills", {"resumeText": "Python, SQL"}, "resumeText"),
        ("/api/analyzer/keyword-optimization", {"resumeText": "short", "jobDescription": JOB}, "resumeText"),
        ("/api/analyzer/keyword-optimization", {"resumeText": RESUME_TEXT, "jobDescription": "Engineer"}, "jobDescription"),
        ("/api/analyzer/compare-resumes", {"resumes": ["a", "b"], "jobDescription": "Engineer"}, "jobDescription"),
    ],
)
async def test_text_length_bounds(client, headers, ai, path, body, field):
    resp = await client.post(path, json=body, headers=headers)
    assert resp.status_code == 400
    assert [d["path"] for d in resp.json()["details"]] == [field]
    assert ai.prompts == []
