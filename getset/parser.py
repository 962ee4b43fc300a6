from getset.errors import CommandError
from getset.models import Command

PREFIX_LENGTH = 5
GET_PREFIX = "$get "
SET_PREFIX = "$set "


def parse_set_params(params: str) -> Command:
    """Split "key=value" on the first '='. Key and value may be empty, the value may contain '='."""
    key, sep, value = params.partition("=")
    if not sep:
        raise CommandError(f"Failed to parse SET params: {params}")
    return Command(verb="set", key=key, value=value)


def parse_command(cmd: str) -> Command:
    if len(cmd) > PREFIX_LENGTH:
        prefix, params = cmd[:PREFIX_LENGTH], cmd[PREFIX_LENGTH:]
        if prefix == GET_PREFIX:
            return Command(verb="get", key=params)
        if prefix == SET_PREFIX:
            return parse_set_params(params)
    raise CommandError(f"Failed to parse command: {cmd}")
