"""
Universe Backtest System (FINAL / FROZEN)

A step-driven backtest built around dynamic universe membership.

Core doctrine:
- Time is absolute (epoch microseconds, ts).
- Universe membership changes arrive as MembershipDelta events.
- A delta is acted on ONLY once every added symbol has data.
- Delisting is terminal; a delisted symbol is never explicitly closed.

Layer responsibilities:
- core      : defines WHAT the world IS (symbols, events)
- universe  : defines WHO is tradable (filter, active set)
- reconciler: defines WHEN membership changes become lifecycle actions
- strategy  : turns lifecycle actions into orders
- engine    : defines HOW the world is driven (step loop, fills, delistings)

The engine owns the active set.
The reconciler only observes diffs against it.
"""
