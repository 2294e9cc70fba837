"""Audited entities: change tracking, around-callback chains, action interception."""
