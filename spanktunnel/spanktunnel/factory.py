
import os
from typing import Iterable, List
from .settings import Config
from .exceptions import ConfigurationError
from .model import PluginConfig
from .selector import SelectionPolicy
from .logger import Logger


class ConfigurationFactory(object):
    """
    Builds the immutable PluginConfig out of "key=value" plugin configuration tokens

    Tokens come from the scheduler's plugin configuration line, where arguments are split on whitespace,
    that's why a "|" in a value stands for a space
    """

    KEYS = ['ssh_cmd', 'ssh_args', 'helpertask_args', 'helper', 'target', 'read_timeout', 'scontrol_host']

    _settings: Config

    def __init__(self, settings: Config):
        self._settings = settings

    def create_defaults(self) -> PluginConfig:
        config = PluginConfig(
            ssh_cmd=self._settings.DEFAULT_SSH_CMD,
            ssh_args=self._settings.DEFAULT_SSH_ARGS,
            helpertask_args=self._settings.DEFAULT_HELPERTASK_ARGS,
            helper_prog=self._settings.DEFAULT_HELPER_PROG,
            target=self._settings.DEFAULT_TARGET,
            read_timeout=self._settings.FALLBACK_READ_TIMEOUT,
            scontrol_host=''
        )

        try:
            config = self._apply(config, 'read_timeout', str(self._settings.DEFAULT_READ_TIMEOUT))
        except ConfigurationError as e:
            Logger.warning('Ignoring SPANKTUNNEL_READ_TIMEOUT="%s": %s, using %.1fs' % (
                self._settings.DEFAULT_READ_TIMEOUT, str(e), config.read_timeout))

        return config

    def from_tokens(self, tokens: Iterable[str]) -> PluginConfig:
        overrides = {}

        for token in tokens:
            key, separator, value = token.partition('=')

            if not separator or key not in self.KEYS:
                Logger.debug('Ignoring unrecognized configuration token "%s"' % token)
                continue

            overrides[key] = value.replace('|', ' ')

        config = self.create_defaults()

        for key, value in overrides.items():
            try:
                config = self._apply(config, key, value)
            except ConfigurationError as e:
                Logger.warning('Ignoring configuration token "%s=%s": %s' % (key, value, str(e)))

        return config

    def from_file(self, path: str) -> PluginConfig:
        return self.from_tokens(self.read_tokens(path))

    @staticmethod
    def read_tokens(path: str) -> List[str]:
        """ Plugstack-like file: comments and blank lines are skipped, every word with "=" is a token """

        Logger.debug('Looking up configuration at "%s" path' % path)

        if not os.path.isfile(path):
            raise ConfigurationError('Specified configuration file "%s" does not exist' % path)

        tokens = []

        with open(path, 'rb') as f:
            content = f.read().decode('utf-8')

        for line in content.split("\n"):
            line = line.split('#', 1)[0].strip()

            if not line:
                continue

            tokens += [word for word in line.split() if '=' in word]

        return tokens

    @staticmethod
    def _apply(config: PluginConfig, key: str, value: str) -> PluginConfig:
        if key == 'helper':
            if not value.strip():
                raise ConfigurationError('helper program path cannot be empty')

            return config._replace(helper_prog=value)

        if key == 'target':
            try:
                return config._replace(target=SelectionPolicy(value.strip().lower()).value)
            except ValueError:
                raise ConfigurationError('target should be one of: %s' % ', '.join(
                    [policy.value for policy in SelectionPolicy]))

        if key == 'read_timeout':
            try:
                timeout = float(value)
            except ValueError:
                raise ConfigurationError('read_timeout is not a number')

            if timeout <= 0:
                raise ConfigurationError('read_timeout should be greater than zero')

            return config._replace(read_timeout=timeout)

        if key == 'scontrol_host':
            return config._replace(scontrol_host=value.strip())

        return config._replace(**{key: value})
