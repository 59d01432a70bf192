
import socket
import unittest
from unittest.mock import Mock, patch

from ..spanktunnel import ssh
from ..spanktunnel.exceptions import SchedulerError
from ..spanktunnel.logger import setup_dummy_logger


def create_streams(stdout: bytes, stderr: bytes = b'', exit_code: int = 0) -> tuple:
    out = Mock()
    out.read.return_value = stdout
    out.channel.recv_exit_status.return_value = exit_code

    err = Mock()
    err.read.return_value = stderr

    return Mock(), out, err


class SSHClientTest(unittest.TestCase):
    def setUp(self) -> None:
        setup_dummy_logger()

    def test_exec_quotes_arguments_and_collects_result(self):
        with patch.object(ssh.paramiko, 'SSHClient') as client_class:
            client = client_class.return_value
            client.exec_command.return_value = create_streams(b'JobId=100 UserId=alice(1000)\n', b'', 0)

            result = ssh.SSHClient('slurm-ctl').exec(['scontrol', 'show', 'job', '100; reboot', '--oneliner'])

        client.connect.assert_called_once()
        self.assertEqual("scontrol show job '100; reboot' --oneliner", client.exec_command.call_args[0][0])
        self.assertEqual(0, result.exit_code)
        self.assertEqual('JobId=100 UserId=alice(1000)\n', result.stdout)

    def test_reconnects_on_timeout(self):
        with patch.object(ssh.paramiko, 'SSHClient') as client_class:
            client = client_class.return_value
            client.exec_command.side_effect = [socket.timeout(), create_streams(b'ok\n')]

            result = ssh.SSHClient('slurm-ctl').exec(['true'])

        self.assertEqual('ok\n', result.stdout)
        self.assertEqual(2, client.connect.call_count)

    def test_gives_up_after_retries(self):
        with patch.object(ssh.paramiko, 'SSHClient') as client_class:
            client_class.return_value.exec_command.side_effect = socket.timeout()

            with self.assertRaises(SchedulerError):
                ssh.SSHClient('slurm-ctl', retries=2).exec(['true'])
