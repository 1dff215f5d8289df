import logging

import phonenumbers

from phonecrawl.exceptions.custom import PhoneValidationError
from phonecrawl.schemas.phone import PhoneCandidate, PhoneConfidence, RejectedNumber

logger = logging.getLogger(__name__)

# Only North American Numbering Plan numbers are handled
DEFAULT_PHONE_REGION = "US"


def validate_phone_number(candidate: PhoneCandidate) -> PhoneCandidate:
    """Validate a candidate as a US number and format it internationally.

    Returns a new candidate (same confidence) with the number formatted like
    "+1 541-754-3010". Raises PhoneValidationError when the number cannot be
    parsed or is not a valid number for the region.
    """
    try:
        parsed = phonenumbers.parse(candidate.number, DEFAULT_PHONE_REGION)
    except phonenumbers.NumberParseException as exc:
        raise PhoneValidationError(candidate.number, reason=f"invalid phone number: {exc}") from exc

    if not phonenumbers.is_valid_number(parsed):
        raise PhoneValidationError(candidate.number)

    formatted = phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.INTERNATIONAL)
    return candidate.model_copy(update={"number": formatted})


def validate_phone_numbers(
    candidates: list[PhoneCandidate],
) -> tuple[list[PhoneCandidate], list[RejectedNumber]]:
    """Split candidates into (valid, rejected), keeping input order."""
    valid: list[PhoneCandidate] = []
    rejected: list[RejectedNumber] = []

    for index, candidate in enumerate(candidates):
        try:
            valid.append(validate_phone_number(candidate))
        except PhoneValidationError as exc:
            logger.debug("Rejected phone number %r: %s", candidate.number, exc.reason)
            rejected.append(RejectedNumber(index=index, number=candidate.number, reason=exc.reason))

    return valid, rejected


def dedup_phone_numbers(candidates: list[PhoneCandidate]) -> list[PhoneCandidate]:
    """Drop repeated numbers, keeping first-occurrence order.

    Each surviving number carries the highest confidence seen for it.
    """
    best: dict[str, PhoneConfidence] = {}
    order: list[PhoneCandidate] = []

    for candidate in candidates:
        current = best.get(candidate.number)
        if current is None:
            order.append(candidate)
            best[candidate.number] = candidate.confidence
        elif candidate.confidence > current:
            best[candidate.number] = candidate.confidence

    return [
        c if c.confidence == best[c.number] else c.model_copy(update={"confidence": best[c.number]})
        for c in order
    ]


def sanitize_phone_numbers(
    candidates: list[PhoneCandidate],
    validate: bool = True,
) -> tuple[list[PhoneCandidate], list[RejectedNumber]]:
    rejected: list[RejectedNumber] = []
    if validate:
        candidates, rejected = validate_phone_numbers(candidates)
    return dedup_phone_numbers(candidates), rejected
