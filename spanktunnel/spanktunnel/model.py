
import pwd
from enum import Enum
from typing import List, NamedTuple, Tuple, Optional


PluginConfig = NamedTuple('PluginConfig', [
    ('ssh_cmd', str), ('ssh_args', str), ('helpertask_args', str), ('helper_prog', str),
    ('target', str), ('read_timeout', float), ('scontrol_host', str)
])

JobRecord = NamedTuple('JobRecord', [
    ('job_id', int), ('user_id', int), ('node_list', str)
])


class PortForwarding(NamedTuple):
    """ Single pair: port on the submission host <==> port on the execution node """

    submit_port: int
    exec_port: int

    def create_forwarding_directive(self) -> str:
        return '%i:localhost:%i' % (self.submit_port, self.exec_port)

    def __str__(self):
        return '%i:%i' % (self.submit_port, self.exec_port)


class TunnelSpec(object):
    """
    Ordered, read-only list of port pairs requested with --tunnel
    """

    _forwardings: Tuple[PortForwarding, ...]

    def __init__(self, forwardings: List[PortForwarding]):
        self._forwardings = tuple(forwardings)

    @property
    def forwardings(self) -> Tuple[PortForwarding, ...]:
        return self._forwardings

    def create_forward_flags(self) -> List[str]:
        """ One -L directive per pair, in the order the user gave them """

        flags = []

        for forwarding in self._forwardings:
            flags += ['-L', forwarding.create_forwarding_directive()]

        return flags

    def __len__(self):
        return len(self._forwardings)

    def __iter__(self):
        return iter(self._forwardings)

    def __eq__(self, other):
        return isinstance(other, TunnelSpec) and other.forwardings == self._forwardings

    def __str__(self):
        return ','.join([str(forwarding) for forwarding in self._forwardings])


class JobContext(NamedTuple):
    job_id: int
    step_id: int
    allocated_nodes: Tuple[str, ...]
    user_id: int

    @property
    def tag(self) -> str:
        """ <job id>.<step id>, the helper program identifies the tunnel state by it """

        return '%i.%i' % (self.job_id, self.step_id)

    @property
    def user_name(self) -> str:
        try:
            return pwd.getpwuid(self.user_id).pw_name
        except KeyError:
            return str(self.user_id)

    def __str__(self):
        return 'Job<%s, uid=%i, nodes=%s>' % (self.tag, self.user_id, ','.join(self.allocated_nodes))


class TunnelState(Enum):
    LAUNCHING = 'launching'
    RUNNING = 'running'
    FAILED = 'failed'


class TunnelProcess(object):
    """
    A launched helper process. Detached: nobody waits for it, the state reflects only what was observed
    """

    command: List[str]
    node: str
    pid: Optional[int]
    captured_port: Optional[int]
    state: TunnelState

    def __init__(self, command: List[str], node: str):
        self.command = command
        self.node = node
        self.pid = None
        self.captured_port = None
        self.state = TunnelState.LAUNCHING

    def on_spawned(self, pid: int):
        self.pid = pid

    def on_port_captured(self, port: int):
        self.captured_port = port
        self.state = TunnelState.RUNNING

    def on_failure(self):
        self.state = TunnelState.FAILED

    def __str__(self):
        return 'Tunnel<node=%s, pid=%s, port=%s, state=%s>' % (
            self.node, str(self.pid), str(self.captured_port), self.state.value
        )
