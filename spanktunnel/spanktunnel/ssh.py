
import shlex
import socket
import time
import paramiko
from typing import List
from traceback import format_exc
from .interfaces import CommandRunnerInterface, CommandResult
from .exceptions import SchedulerError
from .logger import Logger


class SSHClient(CommandRunnerInterface):
    """
    Runs scheduler commands on another host (ex. the controller, when the submission host has no Slurm client tools)

    Wrapper to a SSH client, adds timeouts, retries and error handling
    """

    _ssh: paramiko.SSHClient
    _connection_setup: dict
    _timeout: int
    _retries: int

    def __init__(self, host: str, port: int = 22, user: str = None, timeout: int = 15, retries: int = 3):
        self._ssh = None
        self._timeout = timeout
        self._retries = retries
        self._connection_setup = {
            'hostname': host, 'port': port, 'username': user,
            'timeout': timeout
        }

    def _connect(self):
        Logger.debug('SSH connection to %s is starting' % self._connection_setup['hostname'])
        self.close()

        self._ssh = paramiko.SSHClient()
        self._ssh.load_system_host_keys()
        self._ssh.connect(**self._connection_setup)

    def raw_exec_command(self, command: str, retries: int) -> tuple:
        if retries <= 0:
            raise SchedulerError('SSH command "%s" failed on %s, no retries left' % (
                command, self._connection_setup['hostname']))

        try:
            if self._ssh is None:
                self._connect()

            stdin, stdout, stderr = self._ssh.exec_command(command, timeout=self._timeout)
        except (socket.timeout, paramiko.ssh_exception.SSHException):
            Logger.warning('SSH command failed due to timeout, retrying')
            self.close()
            return self.raw_exec_command(command, retries - 1)
        except OSError:
            Logger.warning('SSH command not possible to execute')
            Logger.debug(format_exc())

            time.sleep(1)
            self.close()
            return self.raw_exec_command(command, retries - 1)

        return stdin, stdout, stderr

    def exec(self, argv: List[str]) -> CommandResult:
        cmd = ' '.join([shlex.quote(arg) for arg in argv])
        Logger.debug('SSH cmd: %s' % cmd)

        stdin, stdout, stderr = self.raw_exec_command(cmd, self._retries)
        stdout_content = stdout.read().decode('utf-8', errors='replace')
        stderr_content = stderr.read().decode('utf-8', errors='replace')
        exit_code = stdout.channel.recv_exit_status()

        if stderr_content:
            Logger.debug('SSH stderr: %s' % stderr_content.strip())

        return CommandResult(exit_code=exit_code, stdout=stdout_content, stderr=stderr_content)

    def close(self):
        if self._ssh is not None:
            self._ssh.close()
            self._ssh = None
