
import shlex
from typing import List
from jinja2 import Environment, BaseLoader, StrictUndefined
from jinja2.exceptions import TemplateError
from .model import PluginConfig, JobContext, TunnelSpec
from .exceptions import ConfigurationError


def quote_value(value) -> str:
    return shlex.quote(str(value))


class HelperCommandBuilder(object):
    """
    Builds argument lists for the external helper program, never a shell string

    The configured ssh_cmd, ssh_args and helpertask_args may reference {{ node }}, {{ job_id }}, {{ step_id }},
    {{ user }} and {{ uid }}. Every substituted value is shell-quoted on the way in.
    """

    _config: PluginConfig
    _env: Environment

    def __init__(self, config: PluginConfig):
        self._config = config
        self._env = Environment(loader=BaseLoader, autoescape=False, undefined=StrictUndefined,
                                finalize=quote_value)

    def create_launch_command(self, node: str, context: JobContext, spec: TunnelSpec) -> List[str]:
        variables = {
            'node': node,
            'job_id': context.job_id,
            'step_id': context.step_id,
            'user': context.user_name,
            'uid': context.user_id
        }

        cmd = [self._config.helper_prog, '-t', node, '-i', context.tag]
        cmd += spec.create_forward_flags()
        cmd += [
            '-s', self.parse(self._config.ssh_cmd, variables),
            '-o', self.parse(self._config.ssh_args, variables)
        ]

        try:
            cmd += shlex.split(self.parse(self._config.helpertask_args, variables))
        except ValueError as e:
            raise ConfigurationError('Cannot split helpertask_args "%s": %s' % (self._config.helpertask_args, str(e)))

        return cmd

    def create_teardown_command(self, job_id: int, step_id: int) -> List[str]:
        return [self._config.helper_prog, '-i', self.create_tag(job_id, step_id), '-r']

    def create_signature(self, job_id: int, step_id: int) -> str:
        """ Part of the helper command line that is unique for a job step """

        return '-i %s' % self.create_tag(job_id, step_id)

    @staticmethod
    def create_tag(job_id: int, step_id: int) -> str:
        return '%i.%i' % (job_id, step_id)

    def parse(self, template: str, variables: dict) -> str:
        """
        Parses a configuration value ex. "-l {{ user }}" into "-l alice"

        :param template:
        :param variables:
        :return:
        """

        if '{' not in template:
            return template

        try:
            return self._env.from_string(template).render(**variables)
        except TemplateError as e:
            raise ConfigurationError('Cannot render "%s": %s' % (template, str(e)))

    @staticmethod
    def render(cmd: List[str]) -> str:
        """ Single line, copy-paste-able form of the command for the logs """

        return ' '.join([shlex.quote(arg) for arg in cmd])
