"""gridhdl — compile gate-level netlists into placed and routed grid layouts.

Subpackages:
  catalog   Cell palette and gate shapes.
  netlist   Yosys JSON models, validation and parsing.
  pipeline  Stages, placer, router, render, and the compile driver.
  web       FastAPI service.
"""

__version__ = "0.1.0"
