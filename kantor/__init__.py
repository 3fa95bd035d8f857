"""
Kantor - Source Package

A small currency exchange (and notes) app: users sign in with email and
password, convert between PLN, EUR, USD, GBP and CHF at fixed rates, and
keep a per-user history in a cloud document store.

DESIGN PRINCIPLES:
1. The UI only talks to the session controller
2. Backend errors are shown to the user verbatim, never raised into the UI
3. Every user's records live under users/{uid}/
4. Identity provider and document store are swappable
5. Every outcome is auditable
"""

__version__ = "1.0.0"
__author__ = "Kantor Team"
