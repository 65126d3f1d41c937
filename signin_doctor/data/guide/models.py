"""Pydantic models for the Firebase setup guide."""

from pydantic import BaseModel, Field


class GuideStep(BaseModel):
    """One numbered step of the console walkthrough."""

    title: str = Field(..., description="Short imperative heading")
    lines: list[str] = Field(default_factory=list, description="Bullet lines under the heading")
    code: str | None = Field(None, description="Optional snippet shown verbatim")
    language: str = Field("text", description="Syntax highlighting lexer for code")
    warning: str | None = Field(None, description="Highlighted caveat")


class TroubleshootingItem(BaseModel):
    """A common failure and what to check."""

    title: str
    lines: list[str] = Field(default_factory=list)
    code: str | None = None
    language: str = "text"


class GuideLink(BaseModel):
    """External resource."""

    title: str
    url: str


class SetupGuide(BaseModel):
    """The complete guide as stored in ``guide.yaml``."""

    title: str = "Firebase Console Setup"
    steps: list[GuideStep] = Field(default_factory=list)
    troubleshooting: list[TroubleshootingItem] = Field(default_factory=list)
    links: list[GuideLink] = Field(default_factory=list)
    failure_checklist: list[str] = Field(default_factory=list)
