"""Firebase console setup guide shown after the fingerprint summary."""

from signin_doctor.data.guide.loader import GuideLoadError, load_guide
from signin_doctor.data.guide.models import GuideLink, GuideStep, SetupGuide, TroubleshootingItem

__all__ = [
    "GuideLink",
    "GuideLoadError",
    "GuideStep",
    "SetupGuide",
    "TroubleshootingItem",
    "load_guide",
]
