
from typing import Iterable, List, Optional
from .settings import Config
from .factory import ConfigurationFactory
from .interfaces import HookContextInterface, SchedulerInterface
from .model import PluginConfig, TunnelProcess, TunnelSpec
from .option import TunnelOption
from .resolver import JobContextResolver
from .scheduler import ScontrolScheduler, LocalCommandRunner
from .selector import NodeSelector, SelectionPolicy
from .launcher import TunnelLauncher
from .ssh import SSHClient
from .exceptions import TunnelError, SpawnFailedError
from .logger import Logger

"""
    Plugin lifecycle - init at load time, local_user_init on the submission side, exit on the execution side
"""


class TunnelPlugin(object):
    settings: Config
    config: PluginConfig
    option: TunnelOption
    resolver: JobContextResolver
    selector: NodeSelector
    launcher: TunnelLauncher

    def __init__(self, settings: Config):
        self.settings = settings
        self.option = TunnelOption()
        self.config = None

    def init(self, tokens: Iterable[str], scheduler: SchedulerInterface = None,
             launcher: TunnelLauncher = None) -> PluginConfig:
        """ Plugin load: configuration tokens are read once, everything else gets the resulting immutable config """

        self.config = ConfigurationFactory(self.settings).from_tokens(tokens)

        return self._setup(scheduler, launcher)

    def _setup(self, scheduler: Optional[SchedulerInterface], launcher: Optional[TunnelLauncher]) -> PluginConfig:
        if scheduler is None:
            scheduler = ScontrolScheduler(self._create_runner(), scontrol=self.settings.SCONTROL)

        self.resolver = JobContextResolver(scheduler)
        self.selector = NodeSelector(SelectionPolicy(self.config.target))
        self.launcher = launcher if launcher else TunnelLauncher(self.config)

        Logger.debug('Plugin configured: %s' % str(self.config))

        return self.config

    def _create_runner(self):
        if self.config.scontrol_host:
            return SSHClient(host=self.config.scontrol_host, timeout=self.settings.SCONTROL_TIMEOUT)

        return LocalCommandRunner(timeout=self.settings.SCONTROL_TIMEOUT)

    def process_tunnel_option(self, value: Optional[str]) -> TunnelSpec:
        """
        --tunnel callback, a format error is the only failure that rejects the submission

        :raises InvalidFormatError:
        """

        return self.option.process(value)

    def local_user_init(self, context: HookContextInterface) -> List[TunnelProcess]:
        """
        Submission side, allocation already known: connect the selected node(s)

        Best effort. Errors are logged and the job starts without a tunnel
        """

        if context.is_remote():
            return []

        if not self.option.is_set:
            Logger.debug('tunnel: no --tunnel requested, nothing to do')
            return []

        tunnels = []

        try:
            job_id, step_id = context.get_job_and_step()
            job = self.resolver.resolve(job_id, step_id)

            for node in self.selector.select_targets(job.allocated_nodes):
                try:
                    tunnels.append(self.launcher.launch(node, job, self.option.spec))
                except TunnelError as e:
                    Logger.warning('tunnel: unable to connect node %s, continuing without a tunnel: %s' % (
                        node, str(e)))

        except TunnelError as e:
            Logger.warning('tunnel: %s, continuing without a tunnel' % str(e))

        return tunnels

    def exit(self, context: HookContextInterface) -> bool:
        """
        Execution side, job step is over: tell the helper to close the matching tunnel

        :return: True when the teardown command was issued
        """

        if not context.is_remote():
            return False

        try:
            job_id, step_id = context.get_job_and_step()
            self.launcher.teardown(job_id, step_id)
        except SpawnFailedError:
            return False
        except TunnelError as e:
            Logger.error('tunnel: cannot tear down the tunnel: %s' % str(e))
            return False

        return True

    def find_tunnels(self, context: HookContextInterface) -> list:
        job_id, step_id = context.get_job_and_step()

        return self.launcher.find_helper_processes(job_id, step_id)
