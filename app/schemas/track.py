"""Track descriptor shared by users and parties."""

from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict


class Track(BaseModel):
    """Currently playing media track.

    Only `title` and `artist` are named; any other keys sent by the client are
    kept and passed back untouched.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    artist: str | None = None


def coerce_track(value: Any) -> Any:
    """Accept a track as an object or as a JSON-encoded string.

    Older clients send the track serialized into a string field; an empty
    string or the literal "null" means no track.
    """
    if isinstance(value, (bytes, str)):
        if not value.strip() or value.strip() == "null":
            return None
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError as e:
            raise ValueError(f"track is not valid JSON: {e}") from e
    return value
