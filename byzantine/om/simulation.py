import logging

from byzantine.om.errors import ConfigurationError
from byzantine.om.process import Process
from byzantine.om.tree import build_tree

log = logging.getLogger(__name__)

def check_config(n, m, source):
    if not isinstance(n, int) or n < 1:
        raise ConfigurationError(f"participant count must be >= 1, got {n!r}")
    if not isinstance(m, int) or m < 0:
        raise ConfigurationError(f"round count must be >= 0, got {m!r}")
    if not isinstance(source, int) or not 0 <= source < n:
        raise ConfigurationError(f"source must be in [0, {n}), got {source!r}")

class Simulation:
    """N processes sharing one PathTree, run for rounds 0..m then asked to decide."""

    def __init__(self, n, m, source, policy):
        check_config(n, m, source)
        self.n         = n
        self.m         = m
        self.source    = source
        self.policy    = policy
        self.tree      = build_tree(m, n, source)
        self.processes = [Process(i, self.tree, policy, send_func=self._deliver) for i in range(n)]
        self.messages  = 0
        self._rounds   = 0

    def _deliver(self, target_id, path, record):
        self.processes[target_id].receive(path, record)

    def is_done(self):
        return self._rounds > self.m

    def run_round(self, round_id, executor=None):
        if executor is None:
            for p in self.processes:
                p.send_round(round_id)
        else:
            # list() drains the map: every delivery of this round lands before the next starts
            list(executor.map(lambda p: p.send_round(round_id), self.processes))
        self.messages += sum(len(self.tree.paths(round_id, p.id)) for p in self.processes) * (self.n - 1)
        self._rounds = round_id + 1

    def run(self, executor=None):
        for round_id in range(self._rounds, self.m + 1):
            self.run_round(round_id, executor)
        log.info(f"n={self.n} m={self.m} source={self.source}: {self.messages} messages in {self.m + 1} rounds")
        return self

    def decide(self, node_id):
        return self.processes[node_id].decide()

    def decisions(self):
        return {p.id: p.decide() for p in self.processes}

    def honest_decisions(self):
        return {p.id: p.decide() for p in self.processes if not p.is_faulty()}

    def agreed(self):
        return len(set(self.honest_decisions().values())) <= 1

def simulate(n, m, source, policy, executor=None):
    return Simulation(n, m, source, policy).run(executor)
