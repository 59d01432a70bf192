
from typing import Optional
from .model import PluginConfig, JobContext, TunnelSpec, TunnelProcess
from .command import HelperCommandBuilder
from .exceptions import SpawnFailedError, NoPortReportedError
from .manager.sysprocess import DetachedProcessManager
from .option import MIN_PORT, MAX_PORT
from .logger import Logger


class TunnelLauncher:
    """
    Starts the helper that opens the SSH tunnel and waits for it to report the forwarded port
    """

    _config: PluginConfig
    _commands: HelperCommandBuilder
    _proc_manager: DetachedProcessManager

    def __init__(self, config: PluginConfig, proc_manager: DetachedProcessManager = None):
        self._config = config
        self._commands = HelperCommandBuilder(config)
        self._proc_manager = proc_manager if proc_manager else DetachedProcessManager()

    def launch(self, node: str, context: JobContext, spec: TunnelSpec) -> TunnelProcess:
        """
        Spawns the helper for a single node and reads the port it reports

        :raises SpawnFailedError:
        :raises NoPortReportedError:
        :return: Tunnel in RUNNING state, with the captured port
        """

        cmd = self._commands.create_launch_command(node, context, spec)
        tunnel = TunnelProcess(cmd, node)

        Logger.info('tunnel: executing %s' % self._commands.render(cmd))

        try:
            proc = self._proc_manager.spawn(cmd, capture_output=True)
        except SpawnFailedError as e:
            tunnel.on_failure()
            Logger.error('tunnel: %s' % str(e))
            raise

        tunnel.on_spawned(proc.pid)
        token = self._proc_manager.read_token(proc, self._config.read_timeout)
        port = self.parse_port(token)

        if port is None:
            tunnel.on_failure()

            if self._proc_manager.is_alive(proc.pid):
                Logger.warning('tunnel: helper pid=%i is still running, leaving it alone' % proc.pid)

            raise NoPortReportedError('Unable to connect node %s, the helper reported "%s" instead of a port' % (
                node, token))

        tunnel.on_port_captured(port)
        Logger.info('tunnel: forward is %i on node %s' % (port, node))

        return tunnel

    def teardown(self, job_id: int, step_id: int):
        """
        Asks the helper to close the tunnel of given job step. Output is ignored, the process is not waited for

        :raises SpawnFailedError:
        """

        cmd = self._commands.create_teardown_command(job_id, step_id)
        Logger.debug('tunnel: executing %s' % self._commands.render(cmd))

        try:
            self._proc_manager.spawn(cmd, capture_output=False)
        except SpawnFailedError as e:
            Logger.error('tunnel: unable to exec remove cmd: %s' % str(e))
            raise

    def find_helper_processes(self, job_id: int, step_id: int) -> list:
        return self._proc_manager.find_processes_by_signature(
            self._commands.create_signature(job_id, step_id),
            program=self._config.helper_prog
        )

    @staticmethod
    def parse_port(token: str) -> Optional[int]:
        """ Accepts "54321" as well as "localhost:54321" """

        raw = token.rpartition(':')[2]

        if not raw.isascii() or not raw.isdigit():
            return None

        port = int(raw)

        if port < MIN_PORT or port > MAX_PORT:
            return None

        return port
