"""
All the structures coming from/to the Kubernetes API.

For strict type-checking, they are detailed to the per-field level
(e.g. `TypedDict` instead of just ``Mapping[Any, Any]``) -- as used
by the engines. The objects can have arbitrary other fields at runtime,
which are not declared in the type definitions at type-checking time.

Everything marked "raw" is a plain unwrapped unprocessed data as JSON-decoded
from Kubernetes API, usually as retrieved in the fetching API calls.
Nothing here is validated: the validation is done where the data are used
(e.g. in the conditions' extraction), since the objects can be malformed
or partially written when they are fetched.
"""
from typing import Any, List, Mapping

from typing_extensions import TypedDict


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Mapping[str, str]
    annotations: Mapping[str, str]
    resourceVersion: str
    generation: int


class RawCondition(TypedDict, total=False):
    type: str
    status: str
    reason: str
    message: str
    lastTransitionTime: str
    lastUpdateTime: str


class RawStatus(TypedDict, total=False):
    conditions: List[RawCondition]
    observedGeneration: int
    replicas: int


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: RawStatus


class RawScaleSpec(TypedDict, total=False):
    replicas: int


class RawScaleStatus(TypedDict, total=False):
    replicas: int
    selector: str


# https://kubernetes.io/docs/reference/kubernetes-api/workload-resources/horizontal-pod-autoscaler-v1/#Scale
class RawScale(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: RawScaleSpec
    status: RawScaleStatus

