"""Human-readable invoice numbers: INV-YYYYMMDD-NNNN.

NNNN is the per-day running sequence handed out by the atomic counter in
invoice_sequences, zero-padded to 4 digits (wider past 9999).
"""
from datetime import date


def format_invoice_number(issue_day: date, sequence: int) -> str:
    if sequence < 1:
        raise ValueError(f"sequence must be >= 1, got {sequence}")
    return f"INV-{issue_day:%Y%m%d}-{sequence:04d}"
