"""Run configuration: participants, rounds, source, traitors, debug.

Read positionally from argv the way the other drivers in this repo do:

    <n> <m> <source> <traitors> <debug>

with defaults 7 2 3 classic 0. traitors is one of
  classic  faulty source splitting by parity plus process 2 always voting One
  none     nobody lies
  random   m ids drawn at random (seeded by OM_SEED if set)
  2,5      explicit comma-separated ids
"""

import os
from dataclasses import dataclass

from byzantine.om.errors import ConfigurationError
from byzantine.om.policy import FaultPolicy, classic_policy, random_traitors, traitor_policy
from byzantine.om.simulation import check_config

N        = 7
M        = 2
SOURCE   = 3
TRAITORS = "classic"
DEBUG    = False

@dataclass(frozen=True)
class Config:
    n:        int  = N
    m:        int  = M
    source:   int  = SOURCE
    traitors: str  = TRAITORS
    debug:    bool = DEBUG

    def validate(self):
        check_config(self.n, self.m, self.source)
        if self.traitors == "classic" and self.n < 3:
            raise ConfigurationError("the classic scenario needs process 2, use n >= 3")
        for t in self.traitor_ids():
            if not 0 <= t < self.n:
                raise ConfigurationError(f"traitor id {t} is not a process id in [0, {self.n})")
        return self

    def traitor_ids(self):
        if self.traitors == "classic":
            return {self.source, 2}
        if self.traitors == "none":
            return set()
        try:
            return {int(t) for t in self.traitors.split(",") if t.strip()}
        except ValueError:
            raise ConfigurationError(f"cannot parse traitors {self.traitors!r}") from None

    def policy(self):
        if self.traitors == "classic":
            return classic_policy(self.source)
        if self.traitors == "none":
            return FaultPolicy()
        return traitor_policy(self.source, self.traitor_ids())

def parse_argv(argv):
    """Config from positional args (argv without the program name)."""
    try:
        n        = int(argv[0]) if len(argv) >= 1 else N
        m        = int(argv[1]) if len(argv) >= 2 else M
        source   = int(argv[2]) if len(argv) >= 3 else SOURCE
        traitors = argv[3]      if len(argv) >= 4 else TRAITORS
        debug    = bool(int(argv[4])) if len(argv) >= 5 else DEBUG
    except ValueError as e:
        raise ConfigurationError(f"bad argument: {e}") from None
    check_config(n, m, source)
    if traitors == "random":
        # resolved once so validate() and policy() see the same ids
        seed     = os.environ.get("OM_SEED")
        traitors = ",".join(str(t) for t in sorted(random_traitors(n, m, None if seed is None else int(seed))))
    return Config(n, m, source, traitors, debug).validate()
