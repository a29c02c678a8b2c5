"""padpack — constructive one-at-a-time placement of pad footprints.

Submodules:
  geometry   Point value type and pure polygon helpers.
  placer     Outline builder, candidate solvers and the pack engine.
  config     Shared numeric rules (PACK_RULES).
  visualize  Debug snapshots and PNG rendering.
"""
