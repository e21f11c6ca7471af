from __future__ import annotations

import logging
from typing import Optional

from ..errors import RetryExhaustedError
from ..lib import mariadb
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)

DB_PASSWORD_PROMPT = "Enter your MariaDB root password"


def collect_db_root_password(ctx: ProvisionContext, state: RunState) -> RunState:
    if state.db_root_password is None:
        state.db_root_password = ctx.prompter.collect_confirmed(DB_PASSWORD_PROMPT, is_secret=True)
    return state


class SecureMariaDBStep(BaseStep):
    step_id = "45_secure_mariadb"
    description = "Set the MariaDB root password and remove insecure defaults"

    def prepare(self, ctx: ProvisionContext, state: RunState) -> RunState:
        return collect_db_root_password(ctx, state)

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        pw = state.db_root_password or ""
        host = ctx.host
        if not mariadb.can_authenticate(host, pw):
            return None
        anonymous = mariadb.query_scalar(host, "SELECT COUNT(*) FROM mysql.user WHERE User='';", password=pw)
        test_db = mariadb.query_scalar(
            host,
            "SELECT COUNT(*) FROM information_schema.schemata WHERE schema_name='test';",
            password=pw,
        )
        if anonymous == "0" and test_db == "0":
            return "root password is set and no anonymous users or test database remain"
        return None

    def _set_root_password(self, ctx: ProvisionContext, password: str) -> None:
        """Change the root password and confirm it by logging in over TCP.

        The TCP account is created alongside, since that is the login that
        proves the password. A freshly restarted server can reject the first
        attempts, so retry with a fixed delay, up to the configured attempt
        count.
        """

        host = ctx.host
        literal = mariadb.sql_literal(password)
        secrets = [password, literal]
        attempts = max(1, ctx.config.password_max_attempts)
        delay = ctx.config.password_retry_delay
        sql = (
            f"ALTER USER 'root'@'localhost' IDENTIFIED BY {literal}; "
            f"GRANT ALL PRIVILEGES ON *.* TO 'root'@'{mariadb.TCP_HOST}' IDENTIFIED BY {literal} WITH GRANT OPTION;"
        )

        for attempt in range(1, attempts + 1):
            r = mariadb.mysql_exec(host, sql, check=False, secrets=secrets)
            if not r.ok:
                # Socket auth is gone once an earlier attempt changed root@localhost.
                mariadb.mysql_exec(host, sql, password=password, check=False, secrets=secrets)
            if host.dry_run or mariadb.can_authenticate(host, password):
                logger.info("MariaDB root password updated")
                return
            logger.warning("Password update not effective yet (attempt %d/%d), retrying", attempt, attempts)
            if attempt < attempts:
                host.sleep(delay)

        raise RetryExhaustedError(f"MariaDB root password could not be set after {attempts} attempts")

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        pw = state.db_root_password or ""
        literal = mariadb.sql_literal(pw)
        secrets = [pw, literal]
        host = ctx.host

        logger.info("Applying MariaDB security settings")
        self._set_root_password(ctx, pw)

        for statement in (
            f"GRANT ALL PRIVILEGES ON *.* TO 'root'@'localhost' IDENTIFIED BY {literal} WITH GRANT OPTION;",
            f"GRANT ALL PRIVILEGES ON *.* TO 'root'@'{mariadb.TCP_HOST}' IDENTIFIED BY {literal} WITH GRANT OPTION;",
            "FLUSH PRIVILEGES;",
            "DELETE FROM mysql.user WHERE User='';",
            "DROP DATABASE IF EXISTS test; DELETE FROM mysql.db WHERE Db='test' OR Db='test\\_%';",
            "FLUSH PRIVILEGES;",
        ):
            mariadb.mysql_exec(host, statement, password=pw, secrets=secrets)

        logger.info("MariaDB configuration and security settings completed")
        ctx.pace()
        return state
