"""
Schemas - Verification Results
File: verification.py

Purpose: Per-check report produced by Distribution.validate() and the
`airdrop verify` command. Each check covers one rehash step (leaf digests,
tree levels, root, stored proofs) or one advisory (duplicate addresses).
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


CheckSeverity = Literal["info", "warn", "error"]


class CheckResult(BaseModel):
    """Outcome of one check over a distribution."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(..., min_length=1, description="e.g. leaf_digests, proofs")
    ok: bool
    severity: CheckSeverity
    message: str
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Offending tree indices, levels or addresses",
    )

    @property
    def is_error(self) -> bool:
        return not self.ok and self.severity == "error"

    @property
    def is_warning(self) -> bool:
        return self.severity == "warn"

    @classmethod
    def passed(cls, check_id: str, message: str, details: dict[str, Any] | None = None) -> "CheckResult":
        return cls(check_id=check_id, ok=True, severity="info", message=message, details=details or {})

    @classmethod
    def warning(cls, check_id: str, message: str, details: dict[str, Any] | None = None) -> "CheckResult":
        """Advisory finding; does not fail verification."""
        return cls(check_id=check_id, ok=True, severity="warn", message=message, details=details or {})

    @classmethod
    def failed(cls, check_id: str, message: str, details: dict[str, Any] | None = None) -> "CheckResult":
        return cls(check_id=check_id, ok=False, severity="error", message=message, details=details or {})


class VerificationResult(BaseModel):
    """
    All checks for one distribution.

    ok stays True until a failed check is added; warnings never clear it.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = True
    checks: list[CheckResult] = Field(default_factory=list)

    @classmethod
    def success(cls) -> "VerificationResult":
        return cls(ok=True, checks=[])

    def add_check(self, check: CheckResult) -> None:
        self.checks.append(check)
        if not check.ok:
            self.ok = False

    @property
    def warning_count(self) -> int:
        return sum(1 for check in self.checks if check.is_warning)

    def get_check(self, check_id: str) -> CheckResult | None:
        return next((c for c in self.checks if c.check_id == check_id), None)

    def get_failed_checks(self) -> list[CheckResult]:
        return [check for check in self.checks if not check.ok]

    def get_error_messages(self) -> list[str]:
        return [check.message for check in self.checks if check.is_error]
