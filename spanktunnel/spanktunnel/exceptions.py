

class TunnelError(Exception):
    """ Base class for everything that can go wrong while setting up or tearing down a job tunnel """


class ConfigurationError(TunnelError):
    pass


class OptionError(TunnelError):
    pass


class InvalidFormatError(OptionError):
    """ The --tunnel value cannot be understood, the submission should be rejected """


class ResolveError(TunnelError):
    pass


class JobNotFoundError(ResolveError):
    pass


class NoAllocationError(ResolveError):
    pass


class EmptyAllocationError(TunnelError):
    pass


class LaunchError(TunnelError):
    pass


class SpawnFailedError(LaunchError):
    pass


class NoPortReportedError(LaunchError):
    pass


class SchedulerError(TunnelError):
    pass


class HookContextError(TunnelError):
    pass


class HostlistError(ValueError):
    pass
