"""SIN vault: encryption, search hashing and audited access."""

from hr_payroll.sin.cipher import EncryptedSINData, SINCipher
from hr_payroll.sin.luhn import format_sin, is_valid_sin, mask_sin
from hr_payroll.sin.vault import AccessDecision, AccessLogFilters, SINVault, decide_access

__all__ = [
    "AccessDecision",
    "AccessLogFilters",
    "EncryptedSINData",
    "SINCipher",
    "SINVault",
    "decide_access",
    "format_sin",
    "is_valid_sin",
    "mask_sin",
]
