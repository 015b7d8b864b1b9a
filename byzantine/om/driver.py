import sys, logging
from concurrent.futures import ThreadPoolExecutor

from byzantine.om.config import parse_argv
from byzantine.om.dump import dump_dot, dump_text
from byzantine.om.errors import ConfigurationError
from byzantine.om.simulation import Simulation

USAGE = "Usage: driver.py <n> <m> <source> <traitors> <debug>"

def report(sim, out):
    for p in sim.processes:
        line = "Source " if p.is_source() else ""
        line += f"Process {p.id}"
        if not p.is_faulty():
            line += f" decides on value {p.decide()}"
        else:
            line += " is faulty"
        print(line, file=out)
    if sim.agreed():
        print("SUCCESS: all non-faulty processes decided the same value", file=out)
    else:
        print("FAILURE: non-faulty processes decided differently", file=out)
    print(file=out)

def dump_loop(sim, debug, prompt, out):
    while True:
        try:
            s = prompt("ID of process to dump, or enter to quit: ")
        except EOFError:
            break
        if not s.strip():
            break
        try:
            node_id = int(s)
            if not 0 <= node_id < sim.n:
                raise IndexError(node_id)
            p = sim.processes[node_id]
        except (ValueError, IndexError):
            print(f"No process with ID {s.strip()!r}, expected 0..{sim.n - 1}", file=out)
            continue
        if debug:
            print(dump_text(p), file=out)
        print(dump_dot(p), file=out)

def main(argv=None, prompt=input, out=None):
    argv = sys.argv[1:] if argv is None else argv
    out  = sys.stdout if out is None else out
    try:
        cfg = parse_argv(argv)
    except ConfigurationError as e:
        print(f"{USAGE}\n{e}", file=out)
        return 1
    logging.basicConfig(level=logging.DEBUG if cfg.debug else logging.WARNING,
                        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    sim = Simulation(cfg.n, cfg.m, cfg.source, cfg.policy())
    print(f"Traitors: {sorted(cfg.traitor_ids())}", file=out)
    with ThreadPoolExecutor(max_workers=min(64, cfg.n)) as executor:
        sim.run(executor)
    report(sim, out)
    dump_loop(sim, cfg.debug, prompt, out)
    return 0

if __name__ == "__main__":
    sys.exit(main())
