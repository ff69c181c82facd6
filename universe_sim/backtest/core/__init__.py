"""
Core World Model (FINAL / FROZEN)

Defines WHAT the world is, independent of any engine or strategy.

Invariants:
- A Symbol is an immutable (ticker, sid) pair.
- A rename produces a NEW Symbol sharing the same sid; the two are never merged.
- Events (Bar, Delisting, Order, Fill, MembershipDelta) are immutable facts.

Core explicitly does NOT:
- Perform IO or data loading
- Decide how or when time advances
"""
