"""Validation and normalization rules for the business hierarchy.

Each entity type declares its rules (required fields, free-text limits,
digit-only identifiers, parent reference and uniqueness constraints) in
ENTITY_RULES. HierarchyValidator evaluates them in a fixed order per field:

1. required
2. max length
3. format (digit-only identifiers, email)
4. parent existence
5. uniqueness (global, or scoped to the parent id)

Evaluation stops at the first failure of a field and accumulates failures
across fields. Uniqueness scopes are part of each entity's declaration so
that Brand.name stays unique per economic group only.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.orm import Session

from hierarchy_admin.data.hierarchy_repository import id_in_range
from hierarchy_admin.models.base import Base
from hierarchy_admin.models.organization import (
    ID_MAX,
    NAME_MAX_LENGTH,
    PERSONAL_TAX_ID_LENGTH,
    UNIT_TAX_ID_LENGTH,
    Brand,
    Collaborator,
    EconomicGroup,
    Unit,
)
from hierarchy_admin.utils.auth import EntityType
from hierarchy_admin.utils.errors import (
    FieldError,
    ValidationError,
    create_field_error,
    create_validation_error,
)
from hierarchy_admin.utils.normalization import normalize_digit_fields

logger = logging.getLogger(__name__)

_DIGITS_PATTERN = re.compile(r"[0-9]+")


# =============================================================================
# Rule Declarations
# =============================================================================

@dataclass(frozen=True)
class ParentRule:
    """Foreign-key reference to the parent entity."""

    field: str
    model: Type[Base]
    label: str


@dataclass(frozen=True)
class UniqueRule:
    """
    Uniqueness of a field, optionally scoped by other fields.

    An empty scope means globally unique. The constraint name matches the
    schema so store-level violations can be mapped back to the field.
    """

    field: str
    constraint: str
    message: str
    scope: Tuple[str, ...] = ()

    def matches_violation(self, table: str, error_text: str) -> bool:
        """Check whether a driver error message refers to this constraint."""
        if self.constraint in error_text:
            return True
        # SQLite reports columns instead of constraint names
        columns = (*self.scope, self.field)
        return all(f"{table}.{column}" in error_text for column in columns)


@dataclass(frozen=True)
class EntityRules:
    """Complete rule declaration for one entity type."""

    model: Type[Base]
    required: Tuple[str, ...]
    text_fields: Tuple[str, ...] = ()
    digit_fields: Dict[str, int] = field(default_factory=dict)
    email_fields: Tuple[str, ...] = ()
    parent: Optional[ParentRule] = None
    unique: Tuple[UniqueRule, ...] = ()

    @property
    def fields(self) -> Tuple[str, ...]:
        """All fields accepted from a payload, in reporting order."""
        return self.required


ENTITY_RULES: Dict[EntityType, EntityRules] = {
    EntityType.ECONOMIC_GROUP: EntityRules(
        model=EconomicGroup,
        required=("name",),
        text_fields=("name",),
        unique=(
            UniqueRule(
                field="name",
                constraint="uq_economic_group_name",
                message="An economic group with this name already exists",
            ),
        ),
    ),
    EntityType.BRAND: EntityRules(
        model=Brand,
        required=("name", "economic_group_id"),
        text_fields=("name",),
        parent=ParentRule(
            field="economic_group_id",
            model=EconomicGroup,
            label="economic group",
        ),
        unique=(
            UniqueRule(
                field="name",
                constraint="uq_brand_group_name",
                message="A brand with this name already exists in this economic group",
                scope=("economic_group_id",),
            ),
        ),
    ),
    EntityType.UNIT: EntityRules(
        model=Unit,
        required=("trade_name", "legal_name", "tax_id", "brand_id"),
        text_fields=("trade_name", "legal_name"),
        digit_fields={"tax_id": UNIT_TAX_ID_LENGTH},
        parent=ParentRule(field="brand_id", model=Brand, label="brand"),
        unique=(
            UniqueRule(
                field="tax_id",
                constraint="uq_unit_tax_id",
                message="A unit with this tax id already exists",
            ),
        ),
    ),
    EntityType.COLLABORATOR: EntityRules(
        model=Collaborator,
        required=("name", "email", "personal_tax_id", "unit_id"),
        text_fields=("name", "email"),
        digit_fields={"personal_tax_id": PERSONAL_TAX_ID_LENGTH},
        email_fields=("email",),
        parent=ParentRule(field="unit_id", model=Unit, label="unit"),
        unique=(
            UniqueRule(
                field="email",
                constraint="uq_collaborator_email",
                message="A collaborator with this email already exists",
            ),
            UniqueRule(
                field="personal_tax_id",
                constraint="uq_collaborator_personal_tax_id",
                message="A collaborator with this personal tax id already exists",
            ),
        ),
    ),
}


def get_entity_rules(entity_type: EntityType) -> EntityRules:
    """Get the rule declaration for an entity type."""
    return ENTITY_RULES[EntityType(entity_type)]


# =============================================================================
# Validation Result
# =============================================================================

@dataclass
class ValidationResult:
    """Outcome of validating one payload: a normalized record or field errors."""

    normalized: Dict[str, Any] = field(default_factory=dict)
    errors: List[FieldError] = field(default_factory=list)
    submitted: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, field_name: str, message: str, code: str = "invalid") -> None:
        """Record an error for a field."""
        self.errors.append(create_field_error(field_name, message, code))

    def has_error(self, field_name: str) -> bool:
        """Check whether a field already failed a rule."""
        return any(error.field == field_name for error in self.errors)

    @property
    def error_fields(self) -> List[str]:
        return [error.field for error in self.errors]

    def to_exception(self) -> ValidationError:
        """Build the ValidationError carrying the field errors and original input."""
        return create_validation_error(self.errors, submitted=self.submitted)

    def raise_for_errors(self) -> Dict[str, Any]:
        """Return the normalized record, or raise ValidationError."""
        if not self.is_valid:
            raise self.to_exception()
        return self.normalized


# =============================================================================
# Validator
# =============================================================================

class HierarchyValidator:
    """
    Normalizes and validates hierarchy payloads against their entity rules.

    Validation reads the database (parent existence, uniqueness) but never
    writes to it.
    """

    def __init__(self, session: Session):
        self.session = session

    def validate(
        self,
        entity_type: EntityType,
        payload: Dict[str, Any],
        exclude_id: Optional[int] = None,
    ) -> ValidationResult:
        """
        Validate a candidate record.

        Args:
            entity_type: Entity type whose rules apply
            payload: Raw field values; unknown keys are ignored
            exclude_id: Id of the record being updated, excluded from uniqueness

        Returns:
            ValidationResult with the normalized record or field errors
        """
        rules = get_entity_rules(entity_type)
        submitted = {name: payload.get(name) for name in rules.fields if name in payload}

        candidate = normalize_digit_fields(submitted, rules.digit_fields)
        for name in rules.text_fields:
            if isinstance(candidate.get(name), str):
                candidate[name] = candidate[name].strip()

        result = ValidationResult(normalized=candidate, submitted=submitted)

        self._check_required(rules, candidate, result)
        self._check_max_length(rules, candidate, result)
        self._check_digit_fields(rules, candidate, result)
        self._check_email_fields(rules, candidate, result)
        self._check_parent(rules, candidate, result)
        self._check_unique(rules, candidate, result, exclude_id)

        if not result.is_valid:
            logger.debug(
                "Validation failed for %s on fields %s",
                EntityType(entity_type).value,
                result.error_fields,
            )
        return result

    # =========================================================================
    # Rules
    # =========================================================================

    def _check_required(
        self,
        rules: EntityRules,
        candidate: Dict[str, Any],
        result: ValidationResult,
    ) -> None:
        for name in rules.required:
            value = candidate.get(name)
            if value is None or (isinstance(value, str) and value == ""):
                result.add_error(name, f"The {_humanize(name)} field is required", "required")

    def _check_max_length(
        self,
        rules: EntityRules,
        candidate: Dict[str, Any],
        result: ValidationResult,
    ) -> None:
        for name in rules.text_fields:
            if result.has_error(name):
                continue
            value = candidate[name]
            if not isinstance(value, str):
                result.add_error(name, f"The {_humanize(name)} must be a string", "type_error")
            elif len(value) > NAME_MAX_LENGTH:
                result.add_error(
                    name,
                    f"The {_humanize(name)} may not be greater than {NAME_MAX_LENGTH} characters",
                    "max_length",
                )

    def _check_digit_fields(
        self,
        rules: EntityRules,
        candidate: Dict[str, Any],
        result: ValidationResult,
    ) -> None:
        for name, length in rules.digit_fields.items():
            if result.has_error(name):
                continue
            value = candidate[name]
            if not isinstance(value, str) or not re.fullmatch(rf"[0-9]{{{length}}}", value):
                result.add_error(
                    name,
                    f"The {_humanize(name)} must contain exactly {length} digits",
                    "invalid_format",
                )

    def _check_email_fields(
        self,
        rules: EntityRules,
        candidate: Dict[str, Any],
        result: ValidationResult,
    ) -> None:
        for name in rules.email_fields:
            if result.has_error(name):
                continue
            try:
                validate_email(candidate[name], check_deliverability=False)
            except EmailNotValidError:
                result.add_error(name, f"The {_humanize(name)} must be a valid email address", "invalid_email")

    def _check_parent(
        self,
        rules: EntityRules,
        candidate: Dict[str, Any],
        result: ValidationResult,
    ) -> None:
        parent = rules.parent
        if parent is None or result.has_error(parent.field):
            return

        parent_id = _coerce_id(candidate[parent.field])
        if parent_id is None:
            result.add_error(parent.field, f"The {parent.label} id must be an integer", "type_error")
            return

        candidate[parent.field] = parent_id
        if not id_in_range(parent_id) or self.session.get(parent.model, parent_id) is None:
            result.add_error(
                parent.field,
                f"The selected {parent.label} does not exist",
                "not_found",
            )

    def _check_unique(
        self,
        rules: EntityRules,
        candidate: Dict[str, Any],
        result: ValidationResult,
        exclude_id: Optional[int],
    ) -> None:
        model = rules.model
        for rule in rules.unique:
            # A scoped check is meaningless while the scope itself is invalid
            if any(result.has_error(name) for name in (rule.field, *rule.scope)):
                continue

            stmt = select(model.id).where(getattr(model, rule.field) == candidate[rule.field])
            for scope_field in rule.scope:
                stmt = stmt.where(getattr(model, scope_field) == candidate[scope_field])
            if exclude_id is not None:
                stmt = stmt.where(model.id != exclude_id)

            if self.session.execute(stmt.limit(1)).first() is not None:
                result.add_error(rule.field, rule.message, "unique")


def validate_and_normalize(
    session: Session,
    entity_type: EntityType,
    payload: Dict[str, Any],
    exclude_id: Optional[int] = None,
) -> ValidationResult:
    """Validate and normalize a payload for an entity type."""
    return HierarchyValidator(session).validate(entity_type, payload, exclude_id)


# =============================================================================
# Helpers
# =============================================================================

def _humanize(field_name: str) -> str:
    if field_name.endswith("_id") and not field_name.endswith("tax_id"):
        field_name = field_name[:-3]
    return field_name.replace("_", " ")


def _coerce_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _DIGITS_PATTERN.fullmatch(value.strip()):
        digits = value.strip()
        # Too long for any id column; int() also refuses very long strings
        if len(digits) > len(str(ID_MAX)):
            return ID_MAX + 1
        return int(digits)
    return None
