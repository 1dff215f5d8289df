from enum import IntEnum

from pydantic import BaseModel


class PhoneConfidence(IntEnum):
    """How certain we are that an extracted string is a phone number."""

    regex_match = 0
    regex_match_with_prefix = 1  # "phone" / "telephone" right before the match
    href_tel = 2  # a[href="tel:..."]

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    PhoneConfidence.regex_match: "regex match",
    PhoneConfidence.regex_match_with_prefix: "regex match with 'phone' prefix",
    PhoneConfidence.href_tel: 'a[href="tel:< phone number >"]',
}


class PhoneCandidate(BaseModel):
    model_config = {"frozen": True}

    number: str
    confidence: PhoneConfidence = PhoneConfidence.regex_match


class RejectedNumber(BaseModel):
    index: int
    number: str
    reason: str
