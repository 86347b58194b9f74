"""Forest EcoSim: a grid ecosystem of trees, lumberjacks and bears.

A rows × cols grid where:
  - Trees age through sapling → tree → elder and seed saplings nearby
  - Lumberjacks wander and fell trees for lumber
  - Bears wander and maul lumberjacks
  - Every 12 ticks (a year) lumberjacks are hired or fired against a lumber
    quota and the bear population is nudged up or down by maul incidents

The core is Ecosystem.tick(); SimulationClock drives it on a timer and
forest_ecosim.viz renders grid snapshots.
"""

__version__ = "0.1.0"
