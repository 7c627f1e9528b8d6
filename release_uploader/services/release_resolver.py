"""Work out which release the assets go to."""
from typing import Any, Mapping, Optional

from ..errors import ConfigurationError

RELEASE_EVENT = "release"


def resolve_release_id(
    release_id: str,
    event_name: str,
    event_payload: Optional[Mapping[str, Any]] = None,
) -> int:
    """
    Resolve the numeric release id.

    An explicit id wins and the event is not consulted. Otherwise the run
    must have been triggered by a ``release`` event and the id is read from
    its payload.

    Raises:
        ConfigurationError: If no id can be determined
    """
    explicit = (release_id or "").strip()
    if explicit:
        try:
            return int(explicit)
        except ValueError as exc:
            raise ConfigurationError(
                f"Release ID must be an integer, got {explicit!r}",
            ) from exc

    if event_name != RELEASE_EVENT:
        raise ConfigurationError(
            "Release ID was not specified and cannot be inferred as this is not a release event.",
            hint="Set the release-id input or run on the 'release' event",
        )

    release = (event_payload or {}).get("release") or {}
    inferred = release.get("id") if isinstance(release, Mapping) else None
    if inferred is None:
        raise ConfigurationError(
            "Release ID cannot be inferred: the release event payload has no release id.",
        )
    try:
        return int(inferred)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Release event payload has a non-numeric release id: {inferred!r}",
        ) from exc
