# fluentdb — fluent SQL query builder over DB-API connections
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Connection configuration.

A connection is described by the 4-tuple ``(host, database, user, password)``
plus an optional port.  Values are resolved in this order:

1. explicit keyword arguments to :func:`load_config`
2. profile variables ``FLUENTDB_<ENVIRONMENT>_<FIELD>`` when an environment
   is selected (argument or ``FLUENTDB_ENVIRONMENT``)
3. plain variables ``FLUENTDB_<FIELD>``
4. built-in defaults (``localhost``, empty password)

Example::

    export FLUENTDB_ENVIRONMENT=PRODUCTION
    export FLUENTDB_PRODUCTION_HOST=db.internal
    export FLUENTDB_DATABASE=blog
    export FLUENTDB_USER=blog
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

from fluentdb.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "FLUENTDB_"
FIELDS = ("host", "database", "user", "password", "port")


@dataclass(frozen=True)
class DatabaseConfig:
    """Where and as whom to connect.

    Unpacks like the classic 4-tuple::

        host, database, user, password = config
    """

    host: str = "localhost"
    database: str = ""
    user: str = ""
    password: str = ""
    port: int | None = None

    @classmethod
    def from_tuple(cls, values: Sequence[str]) -> DatabaseConfig:
        """Build from ``(host, database, user, password)``."""
        if len(values) != 4:
            raise ConfigError(
                f"Expected (host, database, user, password), got {len(values)} values"
            )
        host, database, user, password = values
        return cls(host=host, database=database, user=user, password=password)

    def __iter__(self) -> Iterator[str]:
        return iter((self.host, self.database, self.user, self.password))


def _lookup(env: Mapping[str, str], field: str, environment: str | None) -> str | None:
    if environment:
        value = env.get(f"{ENV_PREFIX}{environment.upper()}_{field.upper()}")
        if value is not None:
            return value
    return env.get(f"{ENV_PREFIX}{field.upper()}")


def load_config(
    environment: str | None = None,
    *,
    env: Mapping[str, str] | None = None,
    require_user: bool = True,
    **overrides: object,
) -> DatabaseConfig:
    """Resolve a :class:`DatabaseConfig` from arguments and the environment.

    Args:
        environment: Profile name (e.g. ``"PRODUCTION"``).  Defaults to
            ``FLUENTDB_ENVIRONMENT``.
        env: Variable mapping to read instead of ``os.environ``.
        require_user: Raise if no user is configured.  SQLite callers
            pass ``False``.
        **overrides: Explicit field values; ``None`` values are ignored.

    Raises:
        ConfigError: ``database`` (or ``user``) is missing, an override
            names an unknown field, or the port is not an integer.
    """
    env = os.environ if env is None else env
    unknown = set(overrides) - set(FIELDS)
    if unknown:
        raise ConfigError(f"Unknown config field(s): {sorted(unknown)}")

    environment = environment or env.get(f"{ENV_PREFIX}ENVIRONMENT") or None

    values: dict[str, object] = {}
    for field in FIELDS:
        value = overrides.get(field)
        if value is None:
            value = _lookup(env, field, environment)
        if value is not None:
            values[field] = value

    if "port" in values:
        try:
            values["port"] = int(values["port"])
        except (TypeError, ValueError):
            raise ConfigError(f"Port must be an integer, got {values['port']!r}")

    config = DatabaseConfig(**values)
    if not config.database:
        raise ConfigError(f"No database configured (set {ENV_PREFIX}DATABASE)")
    if require_user and not config.user:
        raise ConfigError(f"No user configured (set {ENV_PREFIX}USER)")

    logger.debug(
        "Loaded database config: %s@%s/%s (environment=%s)",
        config.user, config.host, config.database, environment or "default",
    )
    return config
