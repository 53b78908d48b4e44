"""Tests for database and user provisioning."""

from __future__ import annotations

import pytest
from host_provisioner.configuration import DatabaseSettings
from host_provisioner.database_setup import (
    DatabaseSetupError,
    build_provisioning_sql,
    provision_database,
)


def _database(**overrides) -> DatabaseSettings:
    values = {
        "name": "casino",
        "user": "casino_app",
        "password": None,
        "root_password": None,
        "host": "localhost",
        "port": 3306,
    }
    values.update(overrides)
    return DatabaseSettings(**values)


def test_sql_without_user_password_omits_identified_by() -> None:
    sql = build_provisioning_sql(_database())

    assert sql == (
        "CREATE DATABASE IF NOT EXISTS `casino`;\n"
        "CREATE USER IF NOT EXISTS 'casino_app'@'localhost';\n"
        "GRANT ALL PRIVILEGES ON `casino`.* TO 'casino_app'@'localhost';\n"
        "FLUSH PRIVILEGES;\n"
    )


def test_sql_escapes_user_password_literal() -> None:
    sql = build_provisioning_sql(_database(password="it's"))

    assert "IDENTIFIED BY 'it''s'" in sql


def test_socket_authentication_uses_privileged_client(make_shell) -> None:
    shell = make_shell()

    outcome = provision_database(_database(), shell)

    call = shell.calls[0]
    assert call.command == ("mysql",)
    assert call.privileged is True
    assert call.input_text.startswith("CREATE DATABASE IF NOT EXISTS `casino`;")
    assert outcome.messages == ("database casino ready for casino_app",)


def test_root_password_is_passed_through_environment(make_shell) -> None:
    shell = make_shell()

    provision_database(_database(root_password="rootpw"), shell)

    call = shell.calls[0]
    assert call.command == ("mysql", "-uroot")
    assert call.env == {"MYSQL_PWD": "rootpw"}
    assert call.privileged is False
    assert all("rootpw" not in part for part in call.command)


def test_admin_failure_is_fatal(make_shell) -> None:
    shell = make_shell()
    shell.respond("mysql", returncode=1, stderr="ERROR 1045 (28000): Access denied")

    with pytest.raises(DatabaseSetupError, match="Access denied") as excinfo:
        provision_database(_database(root_password="wrong"), shell)

    assert excinfo.value.exit_status == 1
    assert excinfo.value.hint is not None and "MYSQL_ROOT_PASSWORD" in excinfo.value.hint
