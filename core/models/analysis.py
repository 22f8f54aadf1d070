# =============================================================================
# core/models/analysis.py - Website Analysis Schemas
# =============================================================================

from pydantic import Field

from core.models.business import CamelModel


class AnalyzeBusinessRequest(CamelModel):
    """
    Request body for POST /api/analyze-business.

    Example:
        {"websiteUrl": "https://acme-rentals.com", "logoUrl": "https://acme-rentals.com/logo.png"}
    """

    website_url: str | None = Field(default=None, description="Public website of the business")
    logo_url: str | None = None
    additional_links: list[str] = Field(default_factory=list)


class WebsiteContent(CamelModel):
    """Text pulled out of a business website for analysis."""

    title: str | None = None
    meta_description: str | None = None
    headings: list[str] = Field(default_factory=list)
    subheadings: list[str] = Field(default_factory=list)
    body_text: str = ""

    def to_prompt_text(self, limit: int = 5000) -> str:
        """
        Flatten into the labelled text block sent to the model.

        Title, description and headings come first so they survive the
        length cap.
        """
        parts: list[str] = []
        if self.title:
            parts.append(f"TITLE: {self.title}")
        if self.meta_description:
            parts.append(f"DESCRIPTION: {self.meta_description}")
        parts.extend(f"HEADING: {h}" for h in self.headings)
        parts.extend(f"SUBHEADING: {h}" for h in self.subheadings[:5])
        parts.append(f"CONTENT: {self.body_text}")
        return " ".join(parts)[:limit]
