# =============================================================================
# tests/test_analysis.py - Business Analysis Tests
# =============================================================================
# Website fetching goes through a patched httpx.Client.get; the Anthropic
# client is a MagicMock.
#
# Run with: pytest tests/test_analysis.py -v
# =============================================================================

import random
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import anthropic
import httpx
import pytest

from app.dependencies import get_business_analyzer
from app.main import app
from core.services.analysis_service import (
    AnalysisError,
    BusinessAnalyzer,
    basic_web_intelligence,
    business_name_from_domain,
    detect_business_type,
    extract_website_content,
    heuristic_profile,
)

SAMPLE_HTML = """
<html>
  <head>
    <title>Summit Heavy Rentals | Denver Excavator Rental</title>
    <meta name="description" content="Excavators, dozers and cranes for Colorado contractors.">
    <style>.hero { color: #FF6600; }</style>
    <script>window.analytics = {};</script>
  </head>
  <body>
    <h1>Heavy Equipment Rental in Denver</h1>
    <h2>Excavators</h2>
    <h2>Bulldozers</h2>
    <p>Call (303) 555-0142 or email rentals@summit-rentals.example.</p>
  </body>
</html>
"""


def fake_ai_response(text: str) -> MagicMock:
    response = MagicMock()
    response.content = [MagicMock(text=text)]
    return response


def html_response(html: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        text=html,
        request=httpx.Request("GET", "https://summit-rentals.example"),
    )


# =============================================================================
# Extraction helpers
# =============================================================================

class TestExtractWebsiteContent:

    def test_pulls_out_labelled_parts(self):
        content = extract_website_content(SAMPLE_HTML)

        assert content.title == "Summit Heavy Rentals | Denver Excavator Rental"
        assert content.meta_description.startswith("Excavators, dozers")
        assert content.headings == ["Heavy Equipment Rental in Denver"]
        assert content.subheadings == ["Excavators", "Bulldozers"]
        assert "window.analytics" not in content.body_text
        assert ".hero" not in content.body_text

    def test_prompt_text_order_and_limit(self):
        text = extract_website_content(SAMPLE_HTML).to_prompt_text()

        assert text.startswith("TITLE: Summit Heavy Rentals")
        assert text.index("DESCRIPTION:") < text.index("HEADING:") < text.index("CONTENT:")
        assert len(extract_website_content("<p>" + "x " * 6000 + "</p>").to_prompt_text()) == 5000


class TestHeuristics:

    @pytest.mark.parametrize("text,expected", [
        ("We rent excavators and cranes", "heavy_equipment"),
        ("Wedding tents and party chairs", "party_rental"),
        ("Pickup truck and vehicle hire", "car_rental"),
        ("Drill and saw rental", "tool_rental"),
        ("Boats by the hour", "custom"),
    ])
    def test_detect_type(self, text, expected):
        assert detect_business_type(text).value == expected

    def test_first_matching_type_wins(self):
        assert detect_business_type("crane and party rentals").value == "heavy_equipment"

    def test_name_from_domain(self):
        assert business_name_from_domain("www.summit.com") == "Summit"
        assert business_name_from_domain("tools.acme.net") == "Tools Acme"

    def test_profile_uses_found_contacts(self):
        content = "Tent and table rental. Email party@fun.example or call 555-867-5309."

        profile = heuristic_profile(content, "fun.example")

        assert profile["type"] == "party_rental"
        assert profile["industry"] == "Event & Party Services"
        assert profile["email"] == "party@fun.example"
        assert profile["phone"] == "555-867-5309"
        assert profile["branding"] == {"primaryColor": "#E91E63", "secondaryColor": "#673AB7"}
        assert profile["confidence"] == 70

    def test_profile_fallbacks_without_content(self):
        profile = heuristic_profile("", "acme.com")

        assert profile["name"] == "Acme"
        assert profile["type"] == "custom"
        assert profile["email"] == "contact@acme.com"
        assert profile["phone"] == "+1-555-000-0000"
        assert [f["name"] for f in profile["customFields"]] == ["Item Name", "Category", "Daily Rate"]

    def test_long_content_raises_confidence(self):
        assert heuristic_profile("drill " * 200, "acme.com")["confidence"] == 85

    def test_basic_web_intelligence_score_range(self):
        rng = random.Random(7)

        scores = {basic_web_intelligence(rng)["reputationScore"] for _ in range(200)}

        assert min(scores) >= 75
        assert max(scores) <= 94


# =============================================================================
# Analyzer
# =============================================================================

class TestBusinessAnalyzer:

    def test_ai_profile_used_when_available(self):
        ai = MagicMock()
        ai.messages.create.return_value = fake_ai_response(
            'Here is the profile:\n{"name": "Summit Heavy Rentals", "type": "heavy_equipment", '
            '"branding": {"primaryColor": "#FF6600"}, "confidence": "90"}'
        )
        analyzer = BusinessAnalyzer(anthropic_client=ai, rng=random.Random(1))

        with patch.object(httpx.Client, "get", return_value=html_response(SAMPLE_HTML)):
            profile = analyzer.analyze("https://summit-rentals.example", logo_url="https://cdn.example/logo.png")

        assert profile["name"] == "Summit Heavy Rentals"
        assert profile["branding"] == {"primaryColor": "#FF6600", "logoUrl": "https://cdn.example/logo.png"}
        assert profile["website"] == "https://summit-rentals.example"
        assert 75 <= profile["webIntelligence"]["reputationScore"] <= 94

        prompt = ai.messages.create.call_args.kwargs["messages"][0]["content"]
        assert "TITLE: Summit Heavy Rentals" in prompt

    def test_falls_back_when_ai_returns_garbage(self):
        ai = MagicMock()
        ai.messages.create.return_value = fake_ai_response("I couldn't find a business here.")
        analyzer = BusinessAnalyzer(anthropic_client=ai)

        with patch.object(httpx.Client, "get", return_value=html_response(SAMPLE_HTML)):
            profile = analyzer.analyze("https://summit-rentals.example")

        assert profile["type"] == "heavy_equipment"
        assert profile["email"] == "rentals@summit-rentals.example"

    def test_falls_back_when_ai_call_fails(self):
        ai = MagicMock()
        ai.messages.create.side_effect = anthropic.APIConnectionError(
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        )
        analyzer = BusinessAnalyzer(anthropic_client=ai)

        with patch.object(httpx.Client, "get", return_value=html_response(SAMPLE_HTML)):
            profile = analyzer.analyze("https://summit-rentals.example")

        assert profile["type"] == "heavy_equipment"

    @pytest.mark.parametrize("content", [
        [],
        [SimpleNamespace(type="tool_use", id="toolu_1", name="lookup", input={})],
    ])
    def test_reply_without_text_falls_back(self, content):
        ai = MagicMock()
        ai.messages.create.return_value = SimpleNamespace(content=content)
        analyzer = BusinessAnalyzer(anthropic_client=ai)

        assert analyzer.analyze_with_ai("https://summit-rentals.example", "TITLE: Summit") is None

        with patch.object(httpx.Client, "get", return_value=html_response(SAMPLE_HTML)):
            profile = analyzer.analyze("https://summit-rentals.example")

        assert profile["type"] == "heavy_equipment"

    def test_unreachable_site_skips_ai(self):
        ai = MagicMock()
        analyzer = BusinessAnalyzer(anthropic_client=ai)

        with patch.object(httpx.Client, "get", side_effect=httpx.ConnectTimeout("timed out")):
            profile = analyzer.analyze("https://www.quiet-site.com")

        ai.messages.create.assert_not_called()
        assert profile["name"] == "Quiet-site"
        assert profile["type"] == "custom"

    def test_error_status_treated_as_no_content(self):
        analyzer = BusinessAnalyzer()

        with patch.object(httpx.Client, "get", return_value=html_response("nope", status_code=503)):
            assert analyzer.fetch_website("https://summit-rentals.example") == ""

    def test_invalid_url(self):
        with pytest.raises(AnalysisError) as exc_info:
            BusinessAnalyzer().analyze("not a url")

        assert exc_info.value.code == "INVALID_URL"


# =============================================================================
# Endpoint
# =============================================================================

class TestAnalyzeEndpoint:

    def test_profile_is_stored(self, client, memory_store):
        analyzer = MagicMock()
        analyzer.analyze.return_value = {
            "name": "Summit Heavy Rentals",
            "type": "heavy_equipment",
            "webIntelligence": {"reputationScore": 81},
            "website": "https://summit-rentals.example",
        }
        app.dependency_overrides[get_business_analyzer] = lambda: analyzer

        response = client.post("/api/analyze-business", json={"websiteUrl": "https://summit-rentals.example"})

        assert response.status_code == 200
        data = response.json()["data"]
        stored = memory_store.get_by_id(data["id"])
        assert stored.name == "Summit Heavy Rentals"
        assert stored.status.value == "setup"
        assert stored.reputation_score == 81

    def test_loosely_typed_ai_profile_is_stored(self, client, memory_store):
        analyzer = MagicMock()
        analyzer.analyze.return_value = {
            "name": "Summit Heavy Rentals",
            "phone": 3035550142,
            "features": ["Delivery", 24],
            "website": "https://summit-rentals.example",
        }
        app.dependency_overrides[get_business_analyzer] = lambda: analyzer

        response = client.post("/api/analyze-business", json={"websiteUrl": "https://summit-rentals.example"})

        assert response.status_code == 200
        stored = memory_store.get_by_id(response.json()["data"]["id"])
        assert stored.phone == "3035550142"
        assert stored.features == ["Delivery", "24"]

    def test_url_required(self, client):
        app.dependency_overrides[get_business_analyzer] = lambda: MagicMock()

        response = client.post("/api/analyze-business", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "Website URL is required"

    def test_invalid_url_is_400(self, client):
        app.dependency_overrides[get_business_analyzer] = lambda: BusinessAnalyzer()

        response = client.post("/api/analyze-business", json={"websiteUrl": "not a url"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
