"""Fault policies decide what each process actually transmits.

A policy is fixed for the whole run and must be deterministic: the same
inputs always produce the same value, so runs are reproducible. The relay
and decision code never asks who is faulty; faultiness only shows up
through source_value() and relay_value(). is_faulty() is for reporting.
"""

import random

from byzantine.om.values import Value, other_value

class FaultPolicy:
    """No traitors: every relay forwards exactly what it received."""

    def __init__(self, source_value=Value.ZERO, default=Value.ONE):
        self._source_value = source_value
        self._default      = default  # tie-break, identical for every process

    def source_value(self):
        return self._source_value

    def relay_value(self, value, sender, destination, path):
        return value

    def default_value(self):
        return self._default

    def is_faulty(self, node_id):
        return False

class ScriptedPolicy(FaultPolicy):
    """Each traitor id maps to a lie function lie(value, destination, path) -> Value."""

    def __init__(self, liars, source_value=Value.ZERO, default=Value.ONE):
        super().__init__(source_value, default)
        self.liars = dict(liars)

    def relay_value(self, value, sender, destination, path):
        lie = self.liars.get(sender)
        if lie is None:
            return value
        return lie(value, destination, path)

    def is_faulty(self, node_id):
        return node_id in self.liars

    def __repr__(self):
        return f"ScriptedPolicy(traitors={sorted(self.liars)})"

def always(v):
    return lambda value, destination, path: v

def flip(value, destination, path):
    return other_value(value)

def split(odd, even):
    return lambda value, destination, path: odd if destination & 1 else even

def classic_policy(source, liar=2):
    # faulty source splits by destination parity, one relay always votes One
    liars = {liar: always(Value.ONE)}
    # the source splits even when it is also the liar
    liars[source] = split(Value.ZERO, Value.ONE)
    return ScriptedPolicy(liars,
                          source_value=Value.ZERO, default=Value.ONE)

def traitor_policy(source, traitors, source_value=Value.ZERO, default=Value.ONE):
    liars = {}
    for t in traitors:
        if t == source:
            # flipped order to even destinations, the real one to odd
            liars[t] = lambda value, destination, path: other_value(value) if destination % 2 == 0 else value
        else:
            liars[t] = flip
    return ScriptedPolicy(liars, source_value=source_value, default=default)

def random_traitors(n, m, seed=None):
    return set(random.Random(seed).sample(range(n), min(m, n)))
