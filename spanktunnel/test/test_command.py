
import unittest

from ..spanktunnel.command import HelperCommandBuilder
from ..spanktunnel.model import PluginConfig, JobContext
from ..spanktunnel.option import parse_tunnel_option
from ..spanktunnel.exceptions import ConfigurationError


def create_config(**kwargs) -> PluginConfig:
    values = {
        'ssh_cmd': 'ssh', 'ssh_args': '', 'helpertask_args': '', 'helper_prog': '/usr/libexec/stunnel',
        'target': 'first', 'read_timeout': 5.0, 'scontrol_host': ''
    }
    values.update(kwargs)

    return PluginConfig(**values)


def create_context(nodes=('nodeA', 'nodeB')) -> JobContext:
    return JobContext(job_id=100, step_id=0, allocated_nodes=tuple(nodes), user_id=4242)


class HelperCommandBuilderTest(unittest.TestCase):
    def test_create_launch_command(self):
        builder = HelperCommandBuilder(create_config(ssh_args='-v -4', helpertask_args='-c -g -w'))
        cmd = builder.create_launch_command('nodeA', create_context(), parse_tunnel_option('8080:80,2222:22'))

        self.assertEqual([
            '/usr/libexec/stunnel', '-t', 'nodeA', '-i', '100.0',
            '-L', '8080:localhost:80', '-L', '2222:localhost:22',
            '-s', 'ssh', '-o', '-v -4',
            '-c', '-g', '-w'
        ], cmd)

    def test_empty_helpertask_args_add_nothing(self):
        cmd = HelperCommandBuilder(create_config()).create_launch_command(
            'nodeA', create_context(), parse_tunnel_option('8080:80'))

        self.assertEqual(['-s', 'ssh', '-o', ''], cmd[-4:])

    def test_hostile_node_name_stays_a_single_argument(self):
        node = 'nodeA; rm -rf ~'
        cmd = HelperCommandBuilder(create_config()).create_launch_command(
            node, create_context([node]), parse_tunnel_option('8080:80'))

        self.assertEqual(node, cmd[2])

    def test_template_variables_are_quoted(self):
        builder = HelperCommandBuilder(create_config(
            ssh_args='-o ProxyJump={{ node }} -o User={{ uid }}',
            helpertask_args='--node {{ node }} --job {{ job_id }}.{{ step_id }}'
        ))

        cmd = builder.create_launch_command('node A;id', create_context(), parse_tunnel_option('8080:80'))

        self.assertIn("-o ProxyJump='node A;id' -o User=4242", cmd)
        self.assertEqual(['--node', 'node A;id', '--job', '100.0'], cmd[-4:])

    def test_unknown_template_variable_is_a_configuration_error(self):
        builder = HelperCommandBuilder(create_config(ssh_args='-p {{ port }}'))

        with self.assertRaises(ConfigurationError):
            builder.create_launch_command('nodeA', create_context(), parse_tunnel_option('8080:80'))

    def test_unbalanced_quotes_in_helpertask_args_are_a_configuration_error(self):
        builder = HelperCommandBuilder(create_config(helpertask_args='--name "unterminated'))

        with self.assertRaises(ConfigurationError):
            builder.create_launch_command('nodeA', create_context(), parse_tunnel_option('8080:80'))

    def test_create_teardown_command(self):
        builder = HelperCommandBuilder(create_config(helper_prog='/opt/stunnel'))

        self.assertEqual(['/opt/stunnel', '-i', '100.0', '-r'], builder.create_teardown_command(100, 0))
        self.assertEqual('-i 100.0', builder.create_signature(100, 0))

    def test_render_is_shell_quoted(self):
        self.assertEqual("/usr/libexec/stunnel -s ssh -o '-v -4' -o ''",
                         HelperCommandBuilder.render(['/usr/libexec/stunnel', '-s', 'ssh', '-o', '-v -4', '-o', '']))
