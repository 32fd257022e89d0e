"""Force simulation: scheduling, forces and the integrator."""

from entity_topology.simulation.forces import (
    CenterForce,
    ForceState,
    LinkForce,
    ManyBodyForce,
    PositionForce,
)
from entity_topology.simulation.integrator import (
    ForceSimulation,
    SimulationHandle,
    simulation_scope,
    start_simulation,
    stop_simulation,
)
from entity_topology.simulation.scheduler import (
    AsyncioFrameScheduler,
    FrameScheduler,
    ManualFrameScheduler,
)

__all__ = [
    # Scheduling
    "FrameScheduler",
    "ManualFrameScheduler",
    "AsyncioFrameScheduler",
    # Forces
    "ForceState",
    "ManyBodyForce",
    "LinkForce",
    "CenterForce",
    "PositionForce",
    # Integrator
    "ForceSimulation",
    "SimulationHandle",
    "start_simulation",
    "stop_simulation",
    "simulation_scope",
]
