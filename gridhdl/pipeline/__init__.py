"""Pipeline stages — stages, placer, router, render.

Each stage consumes the previous stage's output.  In order:

  stages   — layer gates by dependency, add pass-through and sink circuits
  placer   — assign every gate of a stage its rows
  router   — turn one channel layout into the next, sub-step by sub-step
  render   — paint sub-steps and gates onto the shared grid

``layout.compile_netlist`` runs all of them.
"""
