"""
CLI Verify Command

Verify a distribution dump offline:
- Recompute every leaf digest from its value
- Recompute every tree level and the root
- Check every stored proof against the root
- Optionally compare the root with an expected value

Usage:
    airdrop verify distribution.json [--root 0x...] [--json] [--debug]
"""

from __future__ import annotations

import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.crypto.hashing import parse_root, to_hex
from core.distribution import Distribution, load_distribution
from core.schemas.verification import CheckResult, VerificationResult
from airdrop_cli.commands.common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    print_json,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of dump verification for CLI output."""
    path: str = ""
    root: str = ""
    count: int = 0
    ok: bool = False
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    checks: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        for key in ("warnings", "errors", "checks"):
            if not d[key]:
                del d[key]
        return d


def check_expected_root(distribution: Distribution, expected: str) -> CheckResult:
    expected_root = parse_root(expected, field_path="root")
    if distribution.root == expected_root:
        return CheckResult.passed("expected_root", "Root matches the expected root")
    return CheckResult.failed(
        "expected_root",
        f"Root {distribution.root_hex} does not match expected {to_hex(expected_root)}",
    )


def build_summary(
    path: str,
    distribution: Distribution,
    result: VerificationResult,
    debug: bool = False,
) -> VerifySummary:
    summary = VerifySummary(
        path=path,
        root=distribution.root_hex,
        count=len(distribution),
        ok=result.ok,
    )
    for check in result.checks:
        if check.is_error:
            summary.errors.append(check.message)
        elif check.is_warning:
            summary.warnings.append(check.message)
    if debug:
        summary.checks = [
            {"check_id": c.check_id, "ok": c.ok, "severity": c.severity, "message": c.message}
            for c in result.checks
        ]
    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"dump: {summary.path}")
    print(f"root: {summary.root}")
    print(f"allocations: {summary.count}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:10]:
            print(f"  ✗ {err}")

    if summary.warnings:
        print(f"\nwarnings ({len(summary.warnings)}):")
        for warning in summary.warnings:
            print(f"  ! {warning}")

    if summary.checks:
        passed = sum(1 for c in summary.checks if c["ok"])
        print(f"\nchecks: {passed} passed, {len(summary.checks) - passed} failed")
        for check in summary.checks:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        EXIT_SUCCESS if every check passed, EXIT_VERIFICATION_FAILED otherwise
    """
    distribution = load_distribution(args.path)
    result = distribution.validate()
    if args.root:
        result.add_check(check_expected_root(distribution, args.root))

    summary = build_summary(args.path, distribution, result, debug=args.debug)
    if args.json:
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
