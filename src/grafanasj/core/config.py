"""Configuration record for the SimpleJSON endpoints.

A configuration is built once at startup and handed to the dispatcher and
the framework adapters; it is never mutated afterwards.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from grafanasj.core.ports import (
    AnnotatorPort,
    QuerierPort,
    SearcherPort,
    TableQuerierPort,
    TagSearcherPort,
)

DEFAULT_REALM = "simplejson"


@dataclass(frozen=True)
class BasicAuth:
    """A basic-auth credential pair required on data endpoints."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"BasicAuth(username={self.username!r}, password='***')"

    @classmethod
    def from_env(
        cls,
        prefix: str = "GRAFANASJ",
        environ: Mapping[str, str] | None = None,
    ) -> "BasicAuth | None":
        """Read ``<prefix>_USERNAME`` and ``<prefix>_PASSWORD``.

        Returns:
            The credential pair, or None when the username is unset or empty.
        """
        env = os.environ if environ is None else environ
        username = env.get(f"{prefix}_USERNAME", "")
        if not username:
            return None
        return cls(username=username, password=env.get(f"{prefix}_PASSWORD", ""))


@dataclass(frozen=True)
class SimpleJSONConfig:
    """Wired capabilities and access control for a SimpleJSON datasource.

    Attributes:
        querier: Serves timeseries targets on ``/query``.
        table_querier: Serves table targets on ``/query``.
        annotator: Serves ``/annotations``.
        searcher: Serves ``/search``.
        tag_searcher: Serves ``/tag-keys`` and ``/tag-values``.
        basic_auth: Credentials required on data endpoints, if any.
        realm: Realm advertised in the ``WWW-Authenticate`` challenge.

    A capability left as None makes its route answer 501.
    """

    querier: QuerierPort | None = None
    table_querier: TableQuerierPort | None = None
    annotator: AnnotatorPort | None = None
    searcher: SearcherPort | None = None
    tag_searcher: TagSearcherPort | None = None
    basic_auth: BasicAuth | None = None
    realm: str = DEFAULT_REALM

    @classmethod
    def from_source(
        cls,
        source: object,
        *,
        basic_auth: BasicAuth | None = None,
        realm: str = DEFAULT_REALM,
    ) -> "SimpleJSONConfig":
        """Build a configuration from one object implementing any of the ports.

        Example:
            ```python
            config = SimpleJSONConfig.from_source(
                InMemorySource(), basic_auth=BasicAuth.from_env()
            )
            ```
        """
        return cls(
            querier=source if isinstance(source, QuerierPort) else None,
            table_querier=source if isinstance(source, TableQuerierPort) else None,
            annotator=source if isinstance(source, AnnotatorPort) else None,
            searcher=source if isinstance(source, SearcherPort) else None,
            tag_searcher=source if isinstance(source, TagSearcherPort) else None,
            basic_auth=basic_auth,
            realm=realm,
        )
