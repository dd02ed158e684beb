import asyncio
import functools
from typing import Any, Callable, Optional

import click

from attain._cogs.clients import auth
from attain._cogs.configs import configuration
from attain._cogs.structs import credentials, references
from attain._core.actions import errors, loggers
from attain._core.engines import conditions, scaling
from attain._core.intents import accessors


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


class ResourceParamType(click.ParamType):
    name = 'resource'

    def convert(self, value: Any, param: Any, ctx: Any) -> references.Resource:
        if isinstance(value, references.Resource):
            return value
        try:
            return references.parse_resource(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to accept the static credentials in all commands the same way."""
    @click.option('--server', type=str, required=True, envvar='ATTAIN_SERVER')
    @click.option('--token', type=str, envvar='ATTAIN_TOKEN')
    @click.option('--ca-file', type=click.Path(exists=True, dir_okay=False),
                  envvar='ATTAIN_CA_FILE')
    @click.option('--insecure', is_flag=True, envvar='ATTAIN_INSECURE')
    @click.option('--default-namespace', type=str, envvar='ATTAIN_DEFAULT_NAMESPACE')
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(server: str, token: Optional[str], ca_file: Optional[str], insecure: bool,
                default_namespace: Optional[str],
                *args: Any, **kwargs: Any) -> Any:
        info = credentials.ConnectionInfo(
            server=server,
            token=token,
            ca_path=ca_file,
            insecure=insecure or None,
            default_namespace=default_namespace,
        )
        return fn(*args, connection=info, **kwargs)

    return wrapper


@click.version_option(prog_name='attain')
@click.group(name='attain', context_settings=dict(
    auto_envvar_prefix='ATTAIN',
))
def main() -> None:
    pass


@main.command()
@logging_options
@connection_options
@click.option('-n', '--namespace', type=str, default=None)
@click.option('-t', '--type', 'condition_type', type=str, required=True)
@click.option('-s', '--status', 'condition_status', type=str, default='True', show_default=True)
@click.option('-r', '--reason', 'condition_reason', type=str, required=True)
@click.option('--timeout', type=float, default=None)
@click.option('--interval', type=float, default=None)
@click.argument('resource', type=ResourceParamType())
@click.argument('name', type=str)
def wait(
        connection: credentials.ConnectionInfo,
        resource: references.Resource,
        name: str,
        namespace: Optional[str],
        condition_type: str,
        condition_status: str,
        condition_reason: str,
        timeout: Optional[float],
        interval: Optional[float],
) -> None:
    """ Wait until the resource has the condition with the type, status & reason. """
    settings = configuration.AttainSettings()
    if interval is not None:
        settings.polling.interval = interval

    # Without a namespace, the object is assumed to be cluster-scoped.
    namespace = namespace or connection.default_namespace
    if namespace is None:
        resource = references.Resource(resource.group, resource.version, resource.plural,
                                       kind=resource.kind, namespaced=False)

    query = conditions.ConditionQuery(
        resource=resource,
        namespace=references.NamespaceName(namespace) if namespace else None,
        name=name,
        type=condition_type,
        status=condition_status,
        reason=condition_reason,
    )

    async def _wait() -> None:
        logger = loggers.ObjectLogger(locator=query.locator)
        async with auth.connected(connection):
            reader = accessors.APIAccessor(settings=settings, logger=logger)
            await conditions.wait_for_condition(query, reader=reader, settings=settings,
                                                timeout=timeout, logger=logger)

    try:
        asyncio.run(_wait())
    except errors.ConvergenceError as e:
        raise click.ClickException(str(e))


@main.command()
@logging_options
@connection_options
@click.option('-n', '--namespace', type=str, default=None)
@click.option('--replicas', type=click.IntRange(min=0), required=True)
@click.option('--resource', type=ResourceParamType(), default='apps/v1/deployments',
              show_default=True)
@click.option('--timeout', 'setup_timeout', type=float, default=None)
@click.option('--interval', type=float, default=None)
@click.argument('name', type=str)
def scale(
        connection: credentials.ConnectionInfo,
        name: str,
        namespace: Optional[str],
        replicas: int,
        resource: references.Resource,
        setup_timeout: Optional[float],
        interval: Optional[float],
) -> None:
    """ Scale the resource to the replica count and wait until it is scaled. """
    settings = configuration.AttainSettings()
    if interval is not None:
        settings.polling.interval = interval

    namespace = namespace or connection.default_namespace
    if namespace is None:
        raise click.UsageError("A namespace is required: "
                               "use -n/--namespace or --default-namespace.")

    locator = references.Locator(
        resource=resource,
        namespace=references.NamespaceName(namespace),
        name=name,
    )

    async def _scale() -> Optional[int]:
        logger = loggers.ObjectLogger(locator=locator)
        async with auth.connected(connection):
            accessor = accessors.APIAccessor(settings=settings, logger=logger)
            return await scaling.scale_and_converge(locator, replicas, accessor=accessor,
                                                    settings=settings, logger=logger,
                                                    setup_timeout=setup_timeout)

    try:
        previous = asyncio.run(_scale())
    except errors.ConvergenceError as e:
        raise click.ClickException(str(e))

    if previous is not None:
        click.echo(previous)
