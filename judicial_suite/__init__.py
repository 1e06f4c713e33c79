"""
AI Judicial Suite - Case Lifecycle Core
=======================================

In-process engine behind the Assistant / Lawyer / Judge views:
1. Principal directory (signup / login placeholder)
2. Case store with audit timeline
3. Assistant conversation ledger
4. Adjudication (ruling issuance)

No database, no real auth, no NLU. The "AI" is a swappable generator adapter.
"""

__version__ = "1.0.0"
