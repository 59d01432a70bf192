
import unittest
from unittest.mock import patch

from .. import main
from ..spanktunnel.plugin import TunnelPlugin
from ..spanktunnel.logger import setup_dummy_logger


class MainTest(unittest.TestCase):
    def tearDown(self) -> None:
        setup_dummy_logger()

    def test_invalid_tunnel_value_rejects_the_submission(self):
        with self.assertRaises(SystemExit) as exit_context:
            main(['local-setup', '--tunnel', '8080:abc', '--job-id', '100', '--step-id', '0'])

        self.assertEqual(2, exit_context.exception.code)

    def test_unknown_action(self):
        self.assertEqual(1, main(['connect-everything', '--job-id', '100', '--step-id', '0']))

    def test_exit_in_local_context_does_nothing(self):
        with patch.object(TunnelPlugin, 'exit', return_value=False) as exit_mock:
            self.assertEqual(0, main(['exit', '--local', '--job-id', '100', '--step-id', '0']))

        self.assertEqual(1, exit_mock.call_count)
        self.assertFalse(exit_mock.call_args[0][0].is_remote())

    def test_local_setup_passes_configuration_and_option(self):
        with patch.object(TunnelPlugin, 'local_user_init', return_value=[]) as init_mock:
            with patch.object(TunnelPlugin, 'process_tunnel_option') as option_mock:
                self.assertEqual(0, main(['local-setup', '--tunnel', '8080:80', '--local', '-j', '100', '-s', '0',
                                          '-c', 'ssh_args=-v|-4']))

        option_mock.assert_called_once_with('8080:80')
        self.assertEqual(1, init_mock.call_count)
        self.assertEqual((100, 0), init_mock.call_args[0][0].get_job_and_step())
