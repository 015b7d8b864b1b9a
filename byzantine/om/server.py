import sys, logging
from flask import Flask, jsonify, abort

from byzantine.om.config import parse_argv
from byzantine.om.dump import dump_dot, dump_text
from byzantine.om.errors import ConfigurationError, TopologyError
from byzantine.om.simulation import Simulation

logging.getLogger("werkzeug").setLevel(logging.ERROR)

def create_app(sim):
    """Read-only HTTP view of a finished (or partly run) simulation."""
    app = Flask(__name__)

    def process(node_id):
        if not 0 <= node_id < sim.n:
            abort(404, description=f"no process {node_id}")
        return sim.processes[node_id]

    @app.errorhandler(TopologyError)
    def topology_error(e):
        return jsonify(error=str(e)), 409

    @app.route("/status")
    def status():
        return jsonify(done=sim.is_done(), n=sim.n, m=sim.m, source=sim.source, messages=sim.messages)

    @app.route("/processes")
    def processes():
        return jsonify(processes=[{"id": p.id, "source": p.is_source(), "faulty": p.is_faulty()}
                                  for p in sim.processes])

    @app.route("/decide/<int:node_id>")
    def decide(node_id):
        p = process(node_id)
        return jsonify(id=p.id, faulty=p.is_faulty(), value=str(p.decide()))

    @app.route("/dump/<int:node_id>")
    def dump(node_id):
        return dump_text(process(node_id)), 200, {"Content-Type": "text/plain"}

    @app.route("/dot/<int:node_id>")
    def dot(node_id):
        return dump_dot(process(node_id)), 200, {"Content-Type": "text/vnd.graphviz"}

    return app

if __name__ == "__main__":
    try:
        cfg = parse_argv(sys.argv[1:6])
    except ConfigurationError as e:
        print(f"Usage: server.py <n> <m> <source> <traitors> <debug> <port>\n{e}")
        sys.exit(1)
    port = int(sys.argv[6]) if len(sys.argv) >= 7 else 8000
    logging.basicConfig(level=logging.DEBUG if cfg.debug else logging.INFO)
    sim = Simulation(cfg.n, cfg.m, cfg.source, cfg.policy()).run()
    create_app(sim).run(port=port, threaded=True)
