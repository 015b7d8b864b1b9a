import logging, threading
from collections import Counter

from byzantine.om.errors import PolicyError, TopologyError
from byzantine.om.values import Record, Value, format_path, parent

log = logging.getLogger(__name__)

def majority(values, default):
    """Strict majority of One or Zero, default on an even split, else Unknown."""
    values = list(values)
    half   = len(values) // 2
    counts = Counter(values)
    if counts[Value.ONE] > half:
        return Value.ONE
    if counts[Value.ZERO] > half:
        return Value.ZERO
    if counts[Value.ONE] == counts[Value.ZERO] == half:
        return default
    return Value.UNKNOWN

class Process:
    def __init__(self, node_id, tree, policy,
                 send_func):  # send_func(target_id: int, path: tuple, record: Record) -> None
        self.id       = node_id
        self.tree     = tree
        self.policy   = policy
        self._send    = send_func
        # state
        self.records  = {}                # path-tuple -> Record
        self._lock    = threading.Lock()  # guards records against concurrent deliveries
        self._value   = None
        self.initialize()

    def is_source(self):
        return self.id == self.tree.source

    def is_faulty(self):
        return self.policy.is_faulty(self.id)

    def initialize(self):
        if self.is_source():
            value = _checked(self.policy.source_value(), lambda: f"the value of source {self.id}")
            self.records[()] = Record(value, Value.UNKNOWN)

    def send_round(self, round_id):
        for path in self.tree.paths(round_id, self.id):
            value = self.record(parent(path)).received
            for i in range(self.tree.n):
                # the sender is a destination too; its own copy counts in decide()
                if i == self.tree.source:
                    continue
                sent = _checked(self.policy.relay_value(value, self.id, i, path),
                                lambda: f"process {self.id} sending to {i} on path '{format_path(path)}'")
                if log.isEnabledFor(logging.DEBUG):
                    log.debug(f"Sending from process {self.id} to {i}: {{{sent}, {format_path(path)}, {Value.UNKNOWN}}}, "
                              f"getting value from source_node {format_path(parent(path))}")
                self._send(i, path, Record(sent, Value.UNKNOWN))

    def receive(self, path, record):
        with self._lock:
            self.records[tuple(path)] = record  # overwrite, one value per path
            self._value = None

    def record(self, path):
        with self._lock:
            try:
                return self.records[tuple(path)]
            except KeyError:
                raise TopologyError(self.id, tuple(path)) from None

    def decide(self):
        if self.is_source():
            return self.record(()).received
        if self._value is not None:
            return self._value
        for path in self.tree.leaves():
            node = self.record(path)
            node.reduced = node.received
        for rank in range(self.tree.m - 1, -1, -1):
            for path in self.tree.rank(rank):
                node = self.record(path)
                # ids ran out before rank m: the path is a leaf
                if not self.tree.children_of(path):
                    node.reduced = node.received
                else:
                    node.reduced = self._majority(path)
        self._value = self.record(self.tree.root).reduced
        return self._value

    def snapshot(self):
        with self._lock:
            return dict(self.records)

    def walk(self, path=None, records=None):
        """Yield (path, record) children first, starting at the rank-0 path.

        Undelivered records come back as Record() rather than raising, so a
        partially run or source process can still be dumped. Walks a snapshot
        taken under the lock, so deliveries during the walk are not seen.
        """
        records = self.snapshot() if records is None else records
        path = self.tree.root if path is None else tuple(path)
        for child in self.tree.children_of(path):
            yield from self.walk(child, records)
        yield path, records.get(path, Record())

    def _majority(self, path):
        return majority((self.record(c).reduced for c in self.tree.children_of(path)),
                        _checked(self.policy.default_value(), lambda: "the tie-break default"))

    def __repr__(self):
        return f"Process(id={self.id}, source={self.is_source()}, faulty={self.is_faulty()})"

def _checked(value, where):
    if isinstance(value, Value):
        return value
    try:
        return Value(value)
    except ValueError:
        raise PolicyError(f"policy returned {value!r} for {where()}") from None
