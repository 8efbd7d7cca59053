"""Command templates and builders for profile management."""

import shlex
from typing import FrozenSet, List, Optional
from dataclasses import dataclass


class CommandError(Exception):
    """Raised when a command template is misused."""
    pass


@dataclass(frozen=True)
class Command:
    """Immutable argv builder; each with_* call returns a new Command."""
    base_cmd: List[str]
    use_sudo: bool = False
    flags: Optional[FrozenSet[str]] = None

    @classmethod
    def from_str(cls, cmd: str, use_sudo: bool = False, flags: Optional[FrozenSet[str]] = None) -> 'Command':
        command = cls(shlex.split(cmd), use_sudo, flags)
        if not command.base_cmd:
            raise CommandError("Command cannot be empty")
        return command

    def with_arg(self, arg: str) -> 'Command':
        return Command(self.base_cmd + [arg], self.use_sudo, self.flags)

    def with_args(self, *args: str) -> 'Command':
        return Command(self.base_cmd + list(args), self.use_sudo, self.flags)

    def with_flag(self, flag: str) -> 'Command':
        """Add a long flag, e.g. 'no_pager' becomes --no-pager."""
        name = flag.lstrip('-').replace('-', '_')
        if self.flags is not None and name not in self.flags:
            allowed = ", ".join(f"--{f.replace('_', '-')}" for f in sorted(self.flags))
            raise CommandError(f"Unknown flag '{flag}' for {self.base_cmd[0]}; allowed: {allowed}")
        return Command(self.base_cmd + [f"--{name.replace('_', '-')}"], self.use_sudo, self.flags)

    def as_sudo(self, enabled: bool = True) -> 'Command':
        return Command(self.base_cmd, enabled, self.flags)

    def build(self) -> List[str]:
        return ["sudo"] + self.base_cmd if self.use_sudo else list(self.base_cmd)


SYSTEMCTL_FLAGS = frozenset({'quiet', 'no_pager'})


SYSTEMCTL = Command.from_str("systemctl", flags=SYSTEMCTL_FLAGS)
SYSTEMCTL_ENABLE = SYSTEMCTL.with_arg("enable")
SYSTEMCTL_DISABLE = SYSTEMCTL.with_arg("disable")
SYSTEMCTL_START = SYSTEMCTL.with_arg("start")
SYSTEMCTL_STOP = SYSTEMCTL.with_arg("stop")
SYSTEMCTL_RESTART = SYSTEMCTL.with_arg("restart")
SYSTEMCTL_IS_ACTIVE = SYSTEMCTL.with_arg("is-active").with_flag("quiet")
SYSTEMCTL_IS_ENABLED = SYSTEMCTL.with_arg("is-enabled").with_flag("quiet")

# ping takes short options only, so they go in as plain args
PING = Command.from_str("ping")
