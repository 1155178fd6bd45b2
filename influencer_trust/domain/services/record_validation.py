"""Schema validation of records parsed from provider answers.

Validation never raises. It returns either ``ValidRecord`` holding the typed
model or ``InvalidRecord`` listing the fields that broke the schema, so every
stage can discard bad records the same way.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Collection, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..errors import ValidationFailed
from ..models.claim import ClaimCategory, ClassificationRecord, DedupVerdict, RawClaim

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class ValidRecord(Generic[M]):
    """A record that satisfied its schema."""

    record: M


@dataclass(frozen=True)
class InvalidRecord:
    """A record that broke its schema, with the offending field names."""

    violations: List[str]
    raw: Any = None

    def as_error(self) -> ValidationFailed:
        """Describe the rejection as a domain error for logging or reporting."""
        return ValidationFailed(self.violations, self.raw)


ValidationOutcome = Union[ValidRecord, InvalidRecord]


@dataclass(frozen=True)
class RecordSchema(Generic[M]):
    """Shape a provider record must have before it is turned into a model."""

    name: str
    model: Type[M]
    required_fields: Tuple[str, ...]
    list_fields: Tuple[str, ...] = ()
    key_field: Optional[str] = None
    prepare: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = field(default=None, compare=False)


def _prepare_classification(raw: Dict[str, Any]) -> Dict[str, Any]:
    prepared = dict(raw)
    category = prepared.get("category")
    if isinstance(category, str) and category not in {c.value for c in ClaimCategory}:
        prepared["category"] = ClaimCategory.OTHER.value
    score = prepared.get("confidence_score")
    # Fractions below 1 look like a 0-1 scale and are left for the model to reject
    if isinstance(score, float) and (score.is_integer() or score >= 1.0):
        prepared["confidence_score"] = round(score)
    return prepared


RAW_CLAIM_SCHEMA = RecordSchema(
    name="raw claim",
    model=RawClaim,
    required_fields=("claim_text",),
    key_field="claim_text",
)

DEDUP_VERDICT_SCHEMA = RecordSchema(
    name="dedup verdict",
    model=DedupVerdict,
    required_fields=("new_claim_text", "is_duplicate"),
    key_field="new_claim_text",
)

CLASSIFICATION_SCHEMA = RecordSchema(
    name="classification",
    model=ClassificationRecord,
    required_fields=(
        "claim_text",
        "status",
        "category",
        "confidence_score",
        "journals_supporting",
        "journals_questioning",
        "journals_contradicting",
    ),
    list_fields=("journals_supporting", "journals_questioning", "journals_contradicting"),
    key_field="claim_text",
    prepare=_prepare_classification,
)


def validate_record(
    raw: Any,
    schema: RecordSchema,
    allowed_keys: Optional[Collection[str]] = None,
) -> ValidationOutcome:
    """Check one parsed record against a schema.

    Args:
        raw: Element parsed from the provider answer
        schema: Expected shape
        allowed_keys: When given, the schema's key field must be exactly one
            of these values

    Returns:
        ValidRecord with the typed model, or InvalidRecord with violations
    """
    if not isinstance(raw, dict):
        return InvalidRecord(violations=["<record>"], raw=raw)

    violations = [name for name in schema.required_fields if name not in raw]
    for name in schema.list_fields:
        if name in raw and not (
            isinstance(raw[name], list) and all(isinstance(item, str) for item in raw[name])
        ):
            violations.append(name)

    key = raw.get(schema.key_field) if schema.key_field else None
    if schema.key_field and schema.key_field in raw:
        if not isinstance(key, str) or not key.strip():
            violations.append(schema.key_field)
        elif allowed_keys is not None and key not in allowed_keys:
            violations.append(schema.key_field)

    if violations:
        return InvalidRecord(violations=sorted(set(violations)), raw=raw)

    prepared = schema.prepare(raw) if schema.prepare else raw
    try:
        return ValidRecord(record=schema.model.model_validate(prepared))
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in e.errors()})
        return InvalidRecord(violations=fields, raw=raw)


def partition_records(
    raws: List[Any],
    schema: RecordSchema,
    allowed_keys: Optional[Collection[str]] = None,
) -> Tuple[List[Any], List[InvalidRecord]]:
    """Validate a list of records and split it into models and rejections."""
    valid: List[Any] = []
    invalid: List[InvalidRecord] = []
    for raw in raws:
        outcome = validate_record(raw, schema, allowed_keys)
        if isinstance(outcome, ValidRecord):
            valid.append(outcome.record)
        else:
            invalid.append(outcome)
    return valid, invalid
