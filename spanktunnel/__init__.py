#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""The app module, containing the hook entry point."""

import argparse
import os
import sys
from typing import List

from .spanktunnel.settings import Config, ProdConfig, DevConfig
from .spanktunnel.plugin import TunnelPlugin
from .spanktunnel.context import EnvironmentHookContext
from .spanktunnel.factory import ConfigurationFactory
from .spanktunnel.option import parse_tunnel_option, OPTION_ARG_INFO, OPTION_USAGE
from .spanktunnel.exceptions import InvalidFormatError, TunnelError
from .spanktunnel.logger import setup_logger, Logger

ACTIONS = ['local-setup', 'exit', 'status']


def run_action(plugin: TunnelPlugin, context: EnvironmentHookContext, action: str) -> int:
    if action == 'local-setup':
        for tunnel in plugin.local_user_init(context):
            print(tunnel.captured_port)

        return 0

    elif action == 'exit':
        plugin.exit(context)
        return 0

    elif action == 'status':
        try:
            processes = plugin.find_tunnels(context)
        except TunnelError as e:
            Logger.error(str(e))
            return 1

        for proc in processes:
            print('%i %s' % (proc.pid, ' '.join(proc.info['cmdline'] or [])))

        return 0

    print('Invalid command name, possible commands: %s' % ', '.join(ACTIONS))
    return 1


def tunnel_option_type(value: str) -> str:
    try:
        parse_tunnel_option(value)
    except InvalidFormatError as e:
        raise argparse.ArgumentTypeError(str(e))

    return value


def create_parser(settings: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='SSH tunnel between the submission host and the job\'s node')
    parser.add_argument(
        'action',
        metavar='ACTION',
        type=str,
        help='Action. Choice: %s' % ', '.join(ACTIONS)
    )
    parser.add_argument(
        '-t',
        '--tunnel',
        metavar=OPTION_ARG_INFO,
        help=OPTION_USAGE,
        type=tunnel_option_type,
        default=os.getenv(settings.TUNNEL_ENV_VAR) or None
    )
    parser.add_argument(
        '-c',
        '--conf',
        help='Plugin configuration token, ex. ssh_args=-v|-4 (can be repeated)',
        action='append',
        default=None
    )
    parser.add_argument(
        '-f',
        '--conf-file',
        help='Plugstack-like file with plugin configuration tokens',
        default=os.getenv('SPANKTUNNEL_CONFIG', '')
    )
    parser.add_argument(
        '-j',
        '--job-id',
        help='Job id, defaults to $SLURM_JOB_ID',
        type=int,
        default=None
    )
    parser.add_argument(
        '-s',
        '--step-id',
        help='Job step id, defaults to $SLURM_STEP_ID',
        type=int,
        default=None
    )
    parser.add_argument(
        '--remote',
        help='Force remote (execution side) context',
        action='store_true',
        default=None
    )
    parser.add_argument(
        '--local',
        help='Force local (submission side) context',
        dest='remote',
        action='store_false'
    )
    parser.add_argument(
        '-e',
        '--env',
        help='Environment: dev, prod',
        default=os.getenv('SPANKTUNNEL_ENV', 'prod')
    )

    return parser


def main(argv: List[str] = None) -> int:
    #
    # Arguments parsing
    #
    parser = create_parser(Config())
    parsed = parser.parse_args(argv)

    settings = ProdConfig() if parsed.env == 'prod' else DevConfig()
    setup_logger(settings.LOG_PATH, settings.LOG_LEVEL)

    tokens = []

    try:
        if parsed.conf_file:
            tokens += ConfigurationFactory.read_tokens(parsed.conf_file)
    except TunnelError as e:
        Logger.warning('%s, using defaults' % str(e))

    tokens += parsed.conf or []

    plugin = TunnelPlugin(settings)
    plugin.init(tokens)

    if parsed.tunnel:
        plugin.process_tunnel_option(parsed.tunnel)

    context = EnvironmentHookContext(job_id=parsed.job_id, step_id=parsed.step_id, remote=parsed.remote)

    return run_action(plugin, context, parsed.action)


if __name__ == '__main__':
    sys.exit(main())
