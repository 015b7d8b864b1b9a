"""Oral Messages OM(m): Lamport-Shostak-Pease agreement simulated in one process."""

from byzantine.om.values import Value, Record, format_path
from byzantine.om.errors import OralMessagesError, ConfigurationError, TopologyError, PolicyError
from byzantine.om.tree import PathTree, build_tree
from byzantine.om.policy import FaultPolicy, ScriptedPolicy, classic_policy, traitor_policy
from byzantine.om.process import Process, majority
from byzantine.om.simulation import Simulation, simulate
