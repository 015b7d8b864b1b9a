from dataclasses import dataclass
from enum import Enum

class Value(Enum):
    ZERO    = "0"
    ONE     = "1"
    UNKNOWN = "?"   # not reduced yet, or no majority
    UNSET   = "X"   # never written

    def __str__(self):
        return self.value

def other_value(v):
    return Value.ZERO if v == Value.ONE else Value.ONE

@dataclass
class Record:
    received: Value = Value.UNSET
    reduced:  Value = Value.UNSET

def parent(path):
    return path[:-1]

def format_path(path):
    if all(i < 10 for i in path):
        return "".join(str(i) for i in path)
    return ",".join(str(i) for i in path)
