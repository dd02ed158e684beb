import dataclasses
import urllib.parse
from typing import FrozenSet, Iterator, List, Mapping, NewType, Optional

# A specific really existing addressable namespace (at least, the one assumed to be so).
# Made as a NewType for stricter type-checking to avoid collisions with other strings.
NamespaceName = NewType('NamespaceName', str)

# A namespace reference usable in the API calls. `None` means cluster-wide API calls.
Namespace = Optional[NamespaceName]


@dataclasses.dataclass(frozen=True, eq=False, repr=False)
class Resource:
    """
    A reference to a very specific custom or built-in resource kind.

    It is used to form the K8s API URLs. Generally, K8s API only needs
    an API group, an API version, and a plural name of the resource.
    All other names are remembered for logging and informational purposes.
    """

    group: str
    """
    The resource's API group; e.g. ``"extensions.gardener.cloud"``, ``"apps"``.
    For Core v1 API resources, an empty string: ``""``.
    """

    version: str
    """
    The resource's API version; e.g. ``"v1"``, ``"v1alpha1"``, etc.
    """

    plural: str
    """
    The resource's plural name; e.g. ``"deployments"``, ``"infrastructures"``.
    It is used as an API endpoint, together with API group & version.
    """

    kind: Optional[str] = None
    """
    The resource's kind (as in YAML files); e.g. ``"Deployment"``.
    """

    namespaced: bool = True
    """
    Whether the resource is namespaced (``True``) or cluster-scoped (``False``).
    """

    subresources: FrozenSet[str] = frozenset()
    """
    The resource's subresources, if known; e.g. ``{"status", "scale"}``.
    """

    def __hash__(self) -> int:
        return hash((self.group, self.version, self.plural))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Resource):
            self_tuple = (self.group, self.version, self.plural)
            other_tuple = (other.group, other.version, other.plural)
            return self_tuple == other_tuple
        else:
            return NotImplemented

    def __repr__(self) -> str:
        return f'{self.plural}.{self.version}.{self.group}'.strip('.')

    def __iter__(self) -> Iterator[str]:
        return iter((self.group, self.version, self.plural))

    @property
    def api_version(self) -> str:
        return f'{self.group}/{self.version}' if self.group else self.version

    def get_url(
            self,
            *,
            server: Optional[str] = None,
            namespace: Namespace = None,
            name: Optional[str] = None,
            subresource: Optional[str] = None,
            params: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Build a URL to be used with K8s API.

        If the namespace is not set, a cluster-wide URL is returned.
        For cluster-scoped resources, the namespace is prohibited.

        If the name is not set, the URL for the resource list is returned.
        Otherwise (if set), the URL for the individual resource is returned.

        If subresource is set, that subresource's URL is returned,
        regardless of whether such a subresource is known or not.

        Params go to the query parameters (``?param1=value1&param2=value2...``).
        """
        if subresource is not None and name is None:
            raise ValueError("Subresources can be used only with specific resources by their name.")
        if not self.namespaced and namespace is not None:
            raise ValueError("Specific namespaces are not supported for cluster-scoped resources.")
        if self.namespaced and namespace is None and name is not None:
            raise ValueError("Specific namespaces are required for specific namespaced resources.")

        parts: List[Optional[str]] = [
            '/api' if self.group == '' and self.version == 'v1' else '/apis',
            self.group,
            self.version,
            'namespaces' if self.namespaced and namespace is not None else None,
            namespace if self.namespaced and namespace is not None else None,
            self.plural,
            name,
            subresource,
        ]

        query = urllib.parse.urlencode(params, encoding='utf-8') if params else ''
        path = '/'.join([part for part in parts if part])
        url = path + ('?' if query else '') + query
        return url if server is None else server.rstrip('/') + '/' + url.lstrip('/')


def parse_resource(
        spec: str,
        *,
        kind: Optional[str] = None,
        namespaced: bool = True,
) -> Resource:
    """
    Parse a resource specification as used in the CLI and configs.

    The supported forms are ``"version/plural"`` for the core API
    (e.g. ``"v1/pods"``) and ``"group/version/plural"`` for all others
    (e.g. ``"apps/v1/deployments"``, ``"extensions.gardener.cloud/v1alpha1/workers"``).
    """
    parts = [part.strip() for part in spec.strip().strip('/').split('/')]
    if any(not part for part in parts):
        raise ValueError(f"Empty parts in the resource specification: {spec!r}")
    if len(parts) == 2:
        version, plural = parts
        return Resource('', version, plural, kind=kind, namespaced=namespaced)
    elif len(parts) == 3:
        group, version, plural = parts
        return Resource(group, version, plural, kind=kind, namespaced=namespaced)
    else:
        raise ValueError(f"Unsupported resource specification: {spec!r}")


@dataclasses.dataclass(frozen=True)
class Locator:
    """
    A reference to one specific object of a specific resource kind.

    It is used both for addressing the object in K8s API
    and for identifying the object in the logs and in the errors.
    """
    resource: Resource
    namespace: Namespace
    name: str

    def __str__(self) -> str:
        kind = self.resource.kind or repr(self.resource)
        path = f'{self.namespace}/{self.name}' if self.namespace else self.name
        return f'{path} ({kind})'

    def get_url(
            self,
            *,
            server: Optional[str] = None,
            subresource: Optional[str] = None,
    ) -> str:
        return self.resource.get_url(
            server=server,
            namespace=self.namespace,
            name=self.name,
            subresource=subresource,
        )


# Some well-known resources used by the scaling routines.
DEPLOYMENTS = Resource('apps', 'v1', 'deployments', kind='Deployment',
                       namespaced=True, subresources=frozenset({'status', 'scale'}))
STATEFULSETS = Resource('apps', 'v1', 'statefulsets', kind='StatefulSet',
                        namespaced=True, subresources=frozenset({'status', 'scale'}))
