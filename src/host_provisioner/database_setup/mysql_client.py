"""MySQL client invocation selection."""

from __future__ import annotations

from dataclasses import dataclass, field

from host_provisioner.configuration import DatabaseSettings
from host_provisioner.host_shell import CommandResult, HostShell


@dataclass(frozen=True)
class MysqlInvocation:
    """How to call a MySQL client program for one credential set."""

    command: tuple[str, ...]
    env: dict[str, str] = field(default_factory=dict)
    privileged: bool = False

    def run(self, shell: HostShell, *arguments: str, **kwargs) -> CommandResult:
        return shell.run(
            self.command + arguments,
            env=self.env or None,
            privileged=self.privileged,
            **kwargs,
        )


def admin_invocation(database: DatabaseSettings) -> MysqlInvocation:
    """Root client: socket authentication via sudo unless a root password is set."""
    if database.root_password:
        return MysqlInvocation(
            command=("mysql", "-uroot"), env={"MYSQL_PWD": database.root_password}
        )
    return MysqlInvocation(command=("mysql",), privileged=True)


def application_invocation(database: DatabaseSettings, program: str = "mysql") -> MysqlInvocation:
    """Application-user client, authenticated only when a user password is set."""
    command = (program, "-h", database.host, "-P", str(database.port), "-u", database.user)
    if database.password:
        return MysqlInvocation(command=command, env={"MYSQL_PWD": database.password})
    return MysqlInvocation(command=command)
