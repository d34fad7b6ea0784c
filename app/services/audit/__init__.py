from .contract_audit import AuditResult, HEALTHY, HAS_ISSUES, audit_contract, audit_all_contracts

__all__ = [
    "AuditResult",
    "HEALTHY",
    "HAS_ISSUES",
    "audit_contract",
    "audit_all_contracts",
]
