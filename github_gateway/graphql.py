# =============================================================================
# GitHub Gateway - Project GraphQL Query
# =============================================================================
"""
Fixed GraphQL query for GitHub Projects (v2) and its response decoder.

Projects v2 are not exposed by the REST API, so this module builds the
one query the gateway needs and walks the loosely-typed response tree by
hand. Decoding yields a tagged result: ``ProjectDecoded`` with a typed
``Project``, or ``ProjectShapeError`` naming where the response broke
the query's shape. Since the query never changes, any shape deviation
means the upstream contract changed.
"""

from dataclasses import dataclass
from typing import Any, Union

from .models import Project, ProjectItem

PROJECT_ITEMS_LIMIT = 100

PROJECT_QUERY = """
query($owner: String!, $number: Int!) {
  user(login: $owner) {
    projectV2(number: $number) {
      id
      title
      number
      shortDescription
      url
      closed
      items(first: %d) {
        nodes {
          id
          content {
            __typename
            ... on Issue {
              id
              number
              title
            }
            ... on PullRequest {
              id
              number
              title
            }
          }
        }
      }
    }
  }
}
""" % PROJECT_ITEMS_LIMIT

# Content types whose id/number/title are requested by the query
ITEM_CONTENT_TYPES = frozenset({"Issue", "PullRequest"})


@dataclass(frozen=True)
class ProjectDecoded:
    """Successful decode of a project response."""

    project: Project


@dataclass(frozen=True)
class ProjectShapeError:
    """
    The response did not match the shape of the fixed query.

    Attributes:
        path: Dotted path of the offending element.
        reason: What was wrong there.
    """

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


ProjectDecodeResult = Union[ProjectDecoded, ProjectShapeError]


class _ShapeViolation(Exception):
    """Internal signal carrying the location of a shape violation."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def build_project_request(owner: str, number: int | str) -> dict[str, Any]:
    """
    Build the GraphQL request body for a user's project.

    Args:
        owner: Login of the project's owner.
        number: Project number; numeric strings are accepted.

    Returns:
        Dictionary with ``query`` and ``variables``.

    Raises:
        ValueError: If the number is not an integer or a numeric string.
    """
    if isinstance(number, bool) or not isinstance(number, (int, str)):
        raise ValueError(f"Invalid project number: {number!r}")
    try:
        value = int(number)
    except ValueError:
        raise ValueError(f"Invalid project number: {number!r}") from None
    return {
        "query": PROJECT_QUERY,
        "variables": {"owner": owner, "number": value},
    }


# -----------------------------------------------------------------------------
# Tree Walking Helpers
# -----------------------------------------------------------------------------


def _object(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise _ShapeViolation(path, f"expected object, got {_type_name(value)}")
    return value


def _field(obj: dict[str, Any], name: str, path: str) -> Any:
    if name not in obj:
        raise _ShapeViolation(f"{path}.{name}", "missing field")
    return obj[name]


def _string(obj: dict[str, Any], name: str, path: str) -> str:
    value = _field(obj, name, path)
    if not isinstance(value, str):
        raise _ShapeViolation(f"{path}.{name}", f"expected string, got {_type_name(value)}")
    return value


def _optional_string(obj: dict[str, Any], name: str, path: str) -> str:
    # shortDescription is nullable in the schema
    value = _field(obj, name, path)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _ShapeViolation(f"{path}.{name}", f"expected string, got {_type_name(value)}")
    return value


def _integer(obj: dict[str, Any], name: str, path: str) -> int:
    value = _field(obj, name, path)
    if isinstance(value, bool) or not isinstance(value, int):
        raise _ShapeViolation(f"{path}.{name}", f"expected integer, got {_type_name(value)}")
    return value


def _boolean(obj: dict[str, Any], name: str, path: str) -> bool:
    value = _field(obj, name, path)
    if not isinstance(value, bool):
        raise _ShapeViolation(f"{path}.{name}", f"expected boolean, got {_type_name(value)}")
    return value


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def _decode_item(node: Any, path: str) -> ProjectItem | None:
    node = _object(node, path)
    item_id = _string(node, "id", path)
    content = _field(node, "content", path)
    if content is None:
        # deleted or inaccessible content
        return None

    content_path = f"{path}.content"
    content = _object(content, content_path)
    typename = _string(content, "__typename", content_path)
    if typename not in ITEM_CONTENT_TYPES:
        # draft issues and other content the query selects no fields for
        return None

    return ProjectItem(
        id=item_id,
        content_id=_string(content, "id", content_path),
        number=_integer(content, "number", content_path),
        title=_string(content, "title", content_path),
    )


def _decode_project(payload: Any) -> Project:
    root = _object(payload, "$")
    errors = root.get("errors")
    if errors:
        messages = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
        )
        raise _ShapeViolation("$.errors", messages)

    data = _object(_field(root, "data", "$"), "$.data")
    user = _object(_field(data, "user", "$.data"), "$.data.user")
    path = "$.data.user.projectV2"
    project = _object(_field(user, "projectV2", "$.data.user"), path)

    items_path = f"{path}.items"
    items = _object(_field(project, "items", path), items_path)
    nodes = _field(items, "nodes", items_path)
    if not isinstance(nodes, list):
        raise _ShapeViolation(f"{items_path}.nodes", f"expected list, got {_type_name(nodes)}")

    decoded_items = []
    for index, node in enumerate(nodes):
        item = _decode_item(node, f"{items_path}.nodes[{index}]")
        if item is not None:
            decoded_items.append(item)

    return Project(
        id=_string(project, "id", path),
        title=_string(project, "title", path),
        number=_integer(project, "number", path),
        description=_optional_string(project, "shortDescription", path),
        url=_string(project, "url", path),
        closed=_boolean(project, "closed", path),
        items=decoded_items,
    )


def parse_project_response(payload: Any) -> ProjectDecodeResult:
    """
    Decode a GraphQL response for ``PROJECT_QUERY``.

    Item nodes whose ``content`` is null, or whose content is neither an
    issue nor a pull request, are skipped. Every other missing or
    mistyped field fails the whole decode.

    Args:
        payload: Parsed JSON response document.

    Returns:
        ProjectDecoded on success, ProjectShapeError otherwise.
    """
    try:
        return ProjectDecoded(project=_decode_project(payload))
    except _ShapeViolation as e:
        return ProjectShapeError(path=e.path, reason=e.reason)
