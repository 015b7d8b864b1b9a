from byzantine.om.values import format_path

class OralMessagesError(Exception):
    """Base class for every error raised by the simulation."""

class ConfigurationError(OralMessagesError, ValueError):
    """Participant count, round count, source or traitor ids out of range."""

class TopologyError(OralMessagesError, LookupError):
    """A participant was asked for a path that was never delivered to it."""

    def __init__(self, node_id, path):
        super().__init__(f"process {node_id} has no record for path '{format_path(path)}'")
        self.node_id = node_id
        self.path    = path

class PolicyError(OralMessagesError, TypeError):
    """A fault policy produced something that is not a Value."""
