"""Accumulator for integrity violations."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from vault_labels.dataset.errors import ValidationFailed, Violation, ViolationKind


@dataclass
class ValidationReport:
    """Zero or more violations collected by one validation pass."""

    violations: List[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def add(
        self,
        kind: ViolationKind,
        document: str,
        message: str,
        *,
        chain_id: str | None = None,
        record: str | None = None,
        field: str | None = None,
        value: Any = None,
    ) -> Violation:
        violation = Violation(
            kind=kind,
            document=document,
            message=message,
            chain_id=chain_id,
            record=record,
            field=field,
            value=value,
        )
        self.violations.append(violation)
        return violation

    def extend(self, other: "ValidationReport") -> "ValidationReport":
        self.violations.extend(other.violations)
        return self

    def of_kind(self, kind: ViolationKind) -> List[Violation]:
        return [violation for violation in self.violations if violation.kind == kind]

    def counts(self) -> Dict[str, int]:
        """Return violation counts keyed by kind value, for summaries and logs."""

        return dict(Counter(violation.kind.value for violation in self.violations))

    def raise_for_violations(self) -> None:
        """Raise :class:`ValidationFailed` if any violation was recorded."""

        if self.violations:
            raise ValidationFailed(self)

    def __iter__(self) -> Iterator[Violation]:
        return iter(self.violations)

    def __len__(self) -> int:
        return len(self.violations)


__all__ = ["ValidationReport"]
