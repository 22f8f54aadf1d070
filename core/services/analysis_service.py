# =============================================================================
# core/services/analysis_service.py - Business Website Analysis
# =============================================================================
# Turns a business website into a draft business profile for onboarding.
#
# Pipeline:
# 1. Fetch the homepage (httpx) and pull out title, meta description,
#    headings and body text (BeautifulSoup)
# 2. Ask Anthropic for a JSON profile built from that text
# 3. If the site couldn't be read, AI is not configured, or the model's
#    answer doesn't parse, fall back to keyword heuristics
# 4. Attach a basic web-intelligence block (reputation score etc.)
#
# Usage:
#     analyzer = BusinessAnalyzer(anthropic_client=get_anthropic_client())
#     profile = analyzer.analyze("https://acme-rentals.com")
# =============================================================================

import json
import logging
import random
import re
from typing import Any
from urllib.parse import urlparse

import anthropic
import httpx
from bs4 import BeautifulSoup

from core.models.analysis import WebsiteContent
from core.models.business import BusinessType
from lib.utils import ApplicationError, utc_now_iso

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; BusinessAnalyzer/1.0)"
CONTENT_LIMIT = 5000
DEFAULT_MODEL = "claude-3-5-sonnet-20241022"


class AnalysisError(ApplicationError):
    """Raised when a website can't be analyzed at all."""

    def __init__(self, message: str, code: str = "ANALYSIS_FAILED", details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code=code,
            suggestion="Check the website URL and try again",
            details=details,
        )


# =============================================================================
# Per-type defaults used by the heuristic fallback
# =============================================================================

# Checked in order; the first type with a matching keyword wins
TYPE_KEYWORDS: list[tuple[BusinessType, tuple[str, ...]]] = [
    (BusinessType.HEAVY_EQUIPMENT, ("excavator", "bulldozer", "crane")),
    (BusinessType.PARTY_RENTAL, ("party", "wedding", "tent")),
    (BusinessType.CAR_RENTAL, ("car", "vehicle", "truck")),
    (BusinessType.TOOL_RENTAL, ("tool", "drill", "saw")),
]

INDUSTRIES = {
    BusinessType.HEAVY_EQUIPMENT: "Construction Equipment Rental",
    BusinessType.PARTY_RENTAL: "Event & Party Services",
    BusinessType.CAR_RENTAL: "Vehicle Rental Services",
    BusinessType.TOOL_RENTAL: "Tool & Equipment Rental",
    BusinessType.CUSTOM: "Rental Services",
}

FEATURES = {
    BusinessType.HEAVY_EQUIPMENT: [
        "GPS Equipment Tracking", "Maintenance Scheduling", "Delivery Services",
        "Operator Training", "Safety Management",
    ],
    BusinessType.PARTY_RENTAL: [
        "Event Planning", "Setup Services", "Delivery & Pickup",
        "Inventory Management", "Customer Portal",
    ],
    BusinessType.CAR_RENTAL: [
        "GPS Vehicle Tracking", "Insurance Management", "Mileage Monitoring",
        "Digital Contracts", "Mobile Check-in",
    ],
    BusinessType.TOOL_RENTAL: [
        "Tool Reservations", "Safety Management", "Maintenance Tracking",
        "Quick Checkout", "Inventory Control",
    ],
    BusinessType.CUSTOM: [
        "Inventory Management", "Customer Portal", "Booking System", "Payment Processing",
    ],
}

COLORS = {
    BusinessType.HEAVY_EQUIPMENT: ("#FF6600", "#003366"),
    BusinessType.PARTY_RENTAL: ("#E91E63", "#673AB7"),
    BusinessType.CAR_RENTAL: ("#2196F3", "#FF9800"),
    BusinessType.TOOL_RENTAL: ("#4CAF50", "#FF5722"),
    BusinessType.CUSTOM: ("#3B82F6", "#10B981"),
}

CUSTOM_FIELDS = {
    BusinessType.HEAVY_EQUIPMENT: [
        {"name": "Make", "type": "text", "required": True},
        {"name": "Model", "type": "text", "required": True},
        {"name": "Year", "type": "number", "required": True},
        {"name": "Engine Hours", "type": "number", "required": True},
        {"name": "Operating Weight", "type": "number", "required": False},
    ],
    BusinessType.PARTY_RENTAL: [
        {"name": "Color", "type": "select", "required": True, "options": ["White", "Black", "Gold", "Silver"]},
        {"name": "Size/Capacity", "type": "text", "required": True},
        {"name": "Setup Required", "type": "boolean", "required": True},
    ],
    BusinessType.CAR_RENTAL: [
        {"name": "Make", "type": "text", "required": True},
        {"name": "Model", "type": "text", "required": True},
        {"name": "Year", "type": "number", "required": True},
        {"name": "Mileage", "type": "number", "required": True},
        {"name": "License Plate", "type": "text", "required": True},
    ],
    BusinessType.TOOL_RENTAL: [
        {"name": "Brand", "type": "text", "required": True},
        {"name": "Model", "type": "text", "required": True},
        {"name": "Power Type", "type": "select", "required": True, "options": ["Electric", "Battery", "Gas", "Manual"]},
    ],
    BusinessType.CUSTOM: [
        {"name": "Item Name", "type": "text", "required": True},
        {"name": "Category", "type": "text", "required": True},
        {"name": "Daily Rate", "type": "number", "required": True},
    ],
}

EMAIL_PATTERN = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
PHONE_PATTERN = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")

ANALYSIS_PROMPT = """You are analyzing the website {url} for a business intelligence system. Extract REAL, ACCURATE information only.

Website Content: {content}

Requirements:
1. Extract the ACTUAL business name from the website
2. Determine business type based on the content, not assumptions
3. Find REAL contact information (email, phone, address)
4. Extract the brand colors used by the website
5. Identify the company's actual services/products
6. Write a description based on their actual about page or content

For business type, look for these keywords:
- heavy_equipment: excavator, bulldozer, crane, backhoe, skid steer, construction equipment
- party_rental: tent, table, chair, wedding, event, party supplies
- tool_rental: drill, saw, hammer, power tools, hand tools
- car_rental: vehicle, car, truck, auto, transportation

Return ONLY valid JSON:
{{
  "name": "Business name from the website header/title",
  "type": "heavy_equipment|party_rental|car_rental|tool_rental|custom",
  "industry": "Specific industry based on actual content",
  "email": "Email found on contact page or footer",
  "phone": "Phone number from contact info",
  "address": "Address from contact/location page",
  "description": "2-3 sentence description based on their about/services content",
  "features": ["5-6 services/features mentioned on the website"],
  "branding": {{
    "primaryColor": "Dominant color of the website design",
    "secondaryColor": "Accent color of the website design",
    "logoUrl": "Direct URL to their logo image if found"
  }},
  "confidence": "1-100 based on content quality and information found",
  "businessDetails": {{
    "servicesOffered": ["Specific services they mention"],
    "serviceAreas": ["Geographic areas they serve if mentioned"],
    "yearEstablished": "Year founded if mentioned",
    "specialties": ["Any specializations or unique offerings"]
  }}
}}"""


# =============================================================================
# Content extraction
# =============================================================================

def extract_website_content(html: str) -> WebsiteContent:
    """Pull title, meta description, headings and flattened body text out of HTML."""
    soup = BeautifulSoup(html, "html.parser")

    title = None
    title_tag = soup.find("title")
    if title_tag:
        title = title_tag.get_text(strip=True)

    meta_description = None
    meta_tag = soup.find("meta", attrs={"name": "description"})
    if meta_tag:
        meta_description = meta_tag.get("content", "")

    headings = [h.get_text(strip=True) for h in soup.find_all("h1")]
    subheadings = [h.get_text(strip=True) for h in soup.find_all("h2")]

    for el in soup.find_all(["script", "style", "noscript"]):
        el.decompose()

    body_text = " ".join(soup.get_text(separator=" ").split())

    return WebsiteContent(
        title=title,
        meta_description=meta_description,
        headings=headings,
        subheadings=subheadings,
        body_text=body_text,
    )


def business_name_from_domain(domain: str) -> str:
    """"www.acme-rentals.com" -> "Acme-rentals"; multi-part hosts are title-cased per label."""
    name = re.sub(r"^www\.", "", domain)
    name = re.sub(r"\.(com|net|org|biz|info)$", "", name)
    return " ".join(part[:1].upper() + part[1:] for part in name.split("."))


def detect_business_type(content: str) -> BusinessType:
    lowered = content.lower()
    for business_type, keywords in TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return business_type
    return BusinessType.CUSTOM


def heuristic_profile(content: str, domain: str) -> dict[str, Any]:
    """
    Build a profile from keyword matches when AI analysis isn't available.

    Args:
        content: Extracted website text (may be empty)
        domain: Website hostname, used for the name and fallback email

    Returns:
        Profile dict in the same camelCase shape the AI path produces
    """
    business_type = detect_business_type(content)
    primary, secondary = COLORS[business_type]

    email_match = EMAIL_PATTERN.search(content)
    phone_match = PHONE_PATTERN.search(content)

    return {
        "name": business_name_from_domain(domain),
        "type": business_type.value,
        "industry": INDUSTRIES[business_type],
        "email": email_match.group() if email_match else f"contact@{domain}",
        "phone": phone_match.group() if phone_match else "+1-555-000-0000",
        "address": "Address available on website",
        "description": f"Professional {business_type.value.replace('_', ' ')} services",
        "features": list(FEATURES[business_type]),
        "branding": {"primaryColor": primary, "secondaryColor": secondary},
        "confidence": 85 if len(content) > 500 else 70,
        "customFields": [dict(field) for field in CUSTOM_FIELDS[business_type]],
    }


def basic_web_intelligence(rng: random.Random | None = None) -> dict[str, Any]:
    """Placeholder reputation data attached when no richer source is available."""
    rng = rng or random.Random()
    return {
        "reputationScore": rng.randint(75, 94),
        "googleReviews": {"rating": None, "reviewCount": None},
        "socialMedia": {"facebook": {}, "linkedin": {}, "instagram": {}},
        "onlinePresence": {"industryListings": [], "newsArticles": []},
        "competitorAnalysis": {
            "marketPosition": "challenger",
            "strengthsVsCompetitors": [],
            "improvementAreas": [],
        },
        "recommendations": [],
        "overallSentiment": "neutral",
        "lastUpdated": utc_now_iso(),
    }


# =============================================================================
# Analyzer
# =============================================================================

class BusinessAnalyzer:
    """
    Builds draft business profiles from websites.

    Args:
        anthropic_client: Client for AI extraction; None disables the AI path
        model: Anthropic model name
        max_tokens: Response token cap for the AI call
        fetch_timeout: Seconds to wait for the website
        rng: Random source for the basic reputation score
    """

    def __init__(
        self,
        anthropic_client: anthropic.Anthropic | None = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1500,
        fetch_timeout: float = 10.0,
        rng: random.Random | None = None,
    ):
        self.anthropic_client = anthropic_client
        self.model = model
        self.max_tokens = max_tokens
        self.fetch_timeout = fetch_timeout
        self.rng = rng or random.Random()

    def fetch_website(self, url: str) -> str:
        """
        Fetch a website and return its prompt-ready text.

        Returns "" when the site can't be reached or answers with an error
        status; analysis continues without content.
        """
        try:
            with httpx.Client(
                timeout=self.fetch_timeout,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = client.get(url)
        except httpx.HTTPError as e:
            logger.info(f"Scraping {url} failed: {e}")
            return ""

        if response.status_code >= 400:
            logger.info(f"Scraping {url} returned HTTP {response.status_code}")
            return ""

        content = extract_website_content(response.text).to_prompt_text(CONTENT_LIMIT)
        logger.info(f"Scraped content length: {len(content)}")
        return content

    def analyze_with_ai(self, url: str, content: str) -> dict[str, Any] | None:
        """
        Ask the model for a JSON profile.

        Returns:
            Parsed profile, or None when the call fails or the answer
            has no parseable JSON object
        """
        if self.anthropic_client is None:
            return None

        try:
            response = self.anthropic_client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{
                    "role": "user",
                    "content": ANALYSIS_PROMPT.format(url=url, content=content),
                }],
            )
        except anthropic.APIError as e:
            logger.warning(f"AI analysis failed: {e}")
            return None

        # Only text blocks carry the answer; the reply may have none
        text = "".join(
            block.text for block in (response.content or [])
            if isinstance(getattr(block, "text", None), str)
        ).strip()
        if not text:
            logger.warning("AI analysis returned no text")
            return None
        logger.debug(f"AI response: {text[:200]}")

        # Extract JSON, tolerating prose around it
        json_match = re.search(r"\{.*\}", text, re.DOTALL)
        if not json_match:
            logger.warning("AI analysis returned no JSON object")
            return None

        try:
            profile = json.loads(json_match.group())
        except json.JSONDecodeError as e:
            logger.warning(f"AI analysis returned invalid JSON: {e}")
            return None

        if not isinstance(profile, dict):
            return None
        return profile

    def analyze(self, website_url: str, logo_url: str | None = None) -> dict[str, Any]:
        """
        Produce a draft profile for a website.

        Args:
            website_url: Absolute http(s) URL
            logo_url: Overrides any logo the analysis finds

        Returns:
            Profile dict with webIntelligence and website attached

        Raises:
            AnalysisError: If the URL has no hostname
        """
        domain = (urlparse(website_url).hostname or "").lower()
        if not domain:
            raise AnalysisError(
                f"Invalid website URL: {website_url}",
                code="INVALID_URL",
                details={"website_url": website_url},
            )

        logger.info(f"Analyzing website: {website_url}")
        content = self.fetch_website(website_url)

        profile = None
        if content:
            profile = self.analyze_with_ai(website_url, content)
            if profile is not None:
                logger.info(f"AI analysis successful: {profile.get('name')}")

        if profile is None:
            profile = heuristic_profile(content, domain)
            logger.info(f"Using content analysis: {profile['name']}")

        if logo_url:
            branding = profile.get("branding")
            if not isinstance(branding, dict):
                branding = {}
            branding["logoUrl"] = logo_url
            profile["branding"] = branding

        profile["webIntelligence"] = basic_web_intelligence(self.rng)
        profile["website"] = website_url
        return profile
