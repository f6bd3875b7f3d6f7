import pytest


pytestmark = pytest.mark.asyncio


PROFILE = {
    "personalInfo": {"firstName": "Ada", "lastName": "Lovelace"},
    "experience": [{"position": "Tech Lead", "company": "Analytical Co"}],
    "skills": {"technical": ["Python", "Machine Learning"], "soft": ["Mentoring"]},
}


async def test_generate_bio(client, headers, ai, store, user):
    ai.queue("Engineer who builds engines")
    resp = await client.post(
        "/api/bio/generate",
        json={**PROFILE, "platform": "twitter", "tone": "casual", "keywords": ["engines"]},
        headers=headers,
    )
    data = resp.json()["data"]
    assert resp.status_code == 200
    assert data["bio"] == "Engineer who builds engines"
    assert data["characterCount"] == len("Engineer who builds engines")
    assert data["wordCount"] == 4
    assert data["platform"] == "twitter"
    assert "engines" in ai.prompts[0]
    assert (await store.users.get_by_id(user.id)).subscription.usage_count == 1


async def test_generate_bio_rejects_unknown_platform(client, headers):
    resp = await client.post("/api/bio/generate", json={**PROFILE, "platform": "myspace"}, headers=headers)
    assert resp.status_code == 400


async def test_platforms_and_tones(client):
    platforms = (await client.get("/api/bio/platforms")).json()["data"]
    tones = (await client.get("/api/bio/tones")).json()["data"]
    assert {p["id"] for p in platforms["platforms"]} == {"linkedin", "twitter", "instagram", "general", "website"}
    assert [t["id"] for t in tones["tones"]] == ["professional", "casual", "creative", "technical", "friendly"]


async def test_optimize_keywords(client, headers, ai):
    ai.queue("Optimized bio with Python")
    resp = await client.post(
        "/api/bio/optimize-keywords",
        json={"currentBio": "Old bio", "keywords": ["Python"], "platform": "linkedin"},
        headers=headers,
    )
    data = resp.json()["data"]
    assert data["originalBio"] == "Old bio"
    assert data["optimizedBio"] == "Optimized bio with Python"
    assert data["keywords"] == ["Python"]


async def test_optimize_keywords_requires_keywords(client, headers):
    resp = await client.post(
        "/api/bio/optimize-keywords",
        json={"currentBio": "Old bio", "keywords": [], "platform": "linkedin"},
        headers=headers,
    )
    assert resp.status_code == 400


async def test_generate_variations_cycles_tones(client, headers, ai, store, user):
    ai.queue("one", "two", "three", "four")
    resp = await client.post(
        "/api/bio/generate-variations",
        json={**PROFILE, "platform": "linkedin", "count": 4},
        headers=headers,
    )
    variations = resp.json()["data"]["variations"]
    assert [v["id"] for v in variations] == ["variation_1", "variation_2", "variation_3", "variation_4"]
    assert [v["tone"] for v in variations] == ["professional", "casual", "creative", "technical"]
    assert [v["content"] for v in variations] == ["one", "two", "three", "four"]
    assert (await store.users.get_by_id(user.id)).subscription.usage_count == 1


async def test_generate_variations_count_bounds(client, headers):
    resp = await client.post(
        "/api/bio/generate-variations",
        json={**PROFILE, "platform": "linkedin", "count": 6},
        headers=headers,
    )
    assert resp.status_code == 400


async def test_analyze_bio(client, headers, ai):
    bio = "Tech lead. I build reliable systems and mentor engineers!"
    resp = await client.post(
        "/api/bio/analyze",
        json={"bio": bio, "platform": "linkedin", "userData": PROFILE},
        headers=headers,
    )
    analytics = resp.json()["data"]["analytics"]
    assert resp.status_code == 200
    assert analytics["characterCount"] == len(bio)
    assert analytics["sentenceCount"] == 2
    assert analytics["platformLimit"] == 2600
    assert analytics["isWithinLimit"] is True
    assert 0 <= analytics["readabilityScore"] <= 100
    assert "LinkedIn bio is quite short. Consider adding more professional details." in analytics["suggestions"]
    assert analytics["hashtags"][:3] == ["#Python", "#MachineLearning", "#Mentoring"]
    assert "#Technology" in analytics["hashtags"]
    assert ai.prompts == []
