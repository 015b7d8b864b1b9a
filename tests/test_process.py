import logging

import pytest

from byzantine.om.errors import PolicyError, TopologyError
from byzantine.om.policy import FaultPolicy
from byzantine.om.process import Process
from byzantine.om.tree import build_tree
from byzantine.om.values import Record, Value


def make_processes(n, m, source, policy):
    tree = build_tree(m, n, source)
    inbox = []
    procs = []
    def send(target_id, path, record):
        inbox.append((target_id, path, record))
        procs[target_id].receive(path, record)
    procs.extend(Process(i, tree, policy, send) for i in range(n))
    return procs, inbox


def run(procs, m):
    for r in range(m + 1):
        for p in procs:
            p.send_round(r)


def test_source_seeds_root_and_decides_its_own_value():
    procs, _ = make_processes(4, 1, 0, FaultPolicy(source_value=Value.ONE))
    assert procs[0].is_source()
    assert procs[0].records == {(): Record(Value.ONE, Value.UNKNOWN)}
    assert procs[1].records == {}
    assert procs[0].decide() == Value.ONE


def test_round_zero_reaches_everyone_but_the_source():
    procs, inbox = make_processes(4, 1, 0, FaultPolicy(source_value=Value.ONE))
    procs[0].send_round(0)
    assert [(t, p) for t, p, _ in inbox] == [(1, (0,)), (2, (0,)), (3, (0,))]
    assert all(r == Record(Value.ONE, Value.UNKNOWN) for _, _, r in inbox)


def test_relay_includes_self_delivery():
    procs, inbox = make_processes(4, 1, 0, FaultPolicy(source_value=Value.ONE))
    procs[0].send_round(0)
    inbox.clear()
    procs[2].send_round(1)
    assert [(t, p) for t, p, _ in inbox] == [(1, (0, 2)), (2, (0, 2)), (3, (0, 2))]
    assert procs[2].record((0, 2)).received == Value.ONE


def test_receive_overwrites():
    procs, _ = make_processes(4, 1, 0, FaultPolicy())
    procs[1].receive((0,), Record(Value.ONE, Value.UNKNOWN))
    procs[1].receive((0,), Record(Value.ZERO, Value.UNKNOWN))
    assert procs[1].record((0,)).received == Value.ZERO


def test_decide_before_rounds_raises_topology_error():
    procs, _ = make_processes(4, 1, 0, FaultPolicy())
    procs[0].send_round(0)
    with pytest.raises(TopologyError) as e:
        procs[1].decide()
    assert e.value.node_id == 1
    assert e.value.path == (0, 1)
    assert "process 1" in str(e.value) and "'01'" in str(e.value)


def test_decide_is_idempotent():
    procs, _ = make_processes(4, 1, 0, FaultPolicy(source_value=Value.ONE))
    run(procs, 1)
    assert procs[3].decide() == procs[3].decide() == Value.ONE
    assert procs[3].record((0,)).reduced == Value.ONE
    assert procs[3].record((0, 1)).reduced == Value.ONE


class BadPolicy(FaultPolicy):
    def relay_value(self, value, sender, destination, path):
        return "maybe" if sender == 2 else value


def test_policy_must_return_a_value():
    procs, _ = make_processes(4, 1, 0, BadPolicy())
    procs[0].send_round(0)
    procs[1].send_round(1)
    with pytest.raises(PolicyError, match="process 2 sending to 1 on path '02'"):
        procs[2].send_round(1)


class CharPolicy(FaultPolicy):
    def relay_value(self, value, sender, destination, path):
        return "1"


def test_policy_symbols_are_coerced():
    procs, _ = make_processes(4, 1, 0, CharPolicy(source_value=Value.ZERO))
    run(procs, 1)
    assert procs[1].record((0,)).received is Value.ONE
    assert procs[1].decide() == Value.ONE


def test_bad_source_value_is_rejected_at_construction():
    with pytest.raises(PolicyError):
        make_processes(4, 1, 0, FaultPolicy(source_value=None))


def test_walk_is_children_first():
    procs, _ = make_processes(4, 2, 0, FaultPolicy())
    walked = [p for p, _ in procs[0].walk()]
    assert walked[:3] == [(0, 1, 2), (0, 1, 3), (0, 1)]
    assert walked[-1] == (0,)
    assert len(walked) == 10
    # the source never receives anything, so its tree is all unset
    assert all(r == Record() for _, r in procs[0].walk())


def test_sends_are_logged_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="byzantine.om.process")
    procs, _ = make_processes(4, 1, 0, FaultPolicy(source_value=Value.ONE))
    procs[0].send_round(0)
    assert "Sending from process 0 to 3: {1, 0, ?}" in caplog.text


def test_walk_reads_a_snapshot():
    procs, _ = make_processes(4, 1, 0, FaultPolicy(source_value=Value.ONE))
    run(procs, 1)
    walked = procs[1].walk()
    assert next(walked) == ((0, 1), Record(Value.ONE, Value.UNKNOWN))
    procs[1].receive((0, 3), Record(Value.ZERO, Value.UNKNOWN))
    rest = dict(walked)
    assert rest[(0, 3)] == Record(Value.ONE, Value.UNKNOWN)
    assert procs[1].record((0, 3)).received == Value.ZERO
