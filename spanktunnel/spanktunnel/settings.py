# -*- coding: utf-8 -*-
"""Application configuration."""
import os


class Config(object):
    """Base configuration."""

    APP_DIR = os.path.abspath(os.path.dirname(__file__))  # This directory
    PROJECT_ROOT = os.path.abspath(os.path.join(APP_DIR, os.pardir))
    LOG_LEVEL = os.getenv('SPANKTUNNEL_LOG_LEVEL', 'info')
    LOG_PATH = os.getenv('SPANKTUNNEL_LOG_PATH', '')

    # compiled-in plugin defaults, each one can be overridden by a plugin configuration token
    DEFAULT_SSH_CMD = os.getenv('SPANKTUNNEL_SSH_CMD', 'ssh')
    DEFAULT_SSH_ARGS = os.getenv('SPANKTUNNEL_SSH_ARGS', '')
    DEFAULT_HELPERTASK_ARGS = os.getenv('SPANKTUNNEL_HELPERTASK_ARGS', '')
    DEFAULT_HELPER_PROG = os.getenv('SPANKTUNNEL_HELPER', '/usr/libexec/stunnel')
    # validated when the plugin configuration is built, FALLBACK_READ_TIMEOUT is used when it is not a valid number
    DEFAULT_READ_TIMEOUT = os.getenv('SPANKTUNNEL_READ_TIMEOUT', '30')
    FALLBACK_READ_TIMEOUT = 30.0
    DEFAULT_TARGET = 'first'

    SCONTROL = os.getenv('SPANKTUNNEL_SCONTROL', 'scontrol')
    SCONTROL_TIMEOUT = 20
    TUNNEL_ENV_VAR = 'SLURM_STUNNEL'


class ProdConfig(Config):
    """Production configuration."""

    ENV = 'prod'
    DEBUG = False


class DevConfig(Config):
    """Development configuration."""

    ENV = 'dev'
    DEBUG = True
    LOG_LEVEL = 'debug'
