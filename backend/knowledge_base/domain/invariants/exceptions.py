from knowledge_base.exceptions import ValidationError


class InvariantViolation(ValidationError):
    kind = "invariant_violation"
