"""Text and Graphviz renderings of one process's record tree.

Both walk the tree children first. Each node prints as
{received,path,reduced}; feed dump_dot() output to `dot -Tpng`.
"""

from byzantine.om.values import Record, format_path, parent

def node_label(path, record):
    return f"{{{record.received},{format_path(path)},{record.reduced}}}"

def dump_text(process):
    return "".join(node_label(path, record) + "\n" for path, record in process.walk())

def dump_dot(process):
    lines = ["digraph byz {",
             "rankdir=LR;",
             "nodesep=.0025;",
             f"label=\"Process {process.id}\";",
             "node [fontsize=8,width=.005,height=.005,shape=plaintext];",
             "edge [fontsize=8,arrowsize=0.25];"]
    records = process.snapshot()
    for path, record in process.walk(records=records):
        if len(path) == 1:
            edge = "General->"
        else:
            up = parent(path)
            edge = f"\"{node_label(up, records.get(up, Record()))}\"->"
        lines.append(f"{edge}\"{node_label(path, record)}\";")
    lines.append("};")
    return "\n".join(lines) + "\n"
