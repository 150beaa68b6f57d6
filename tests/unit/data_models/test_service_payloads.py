import pytest

from stormlink.data_models import (
    GridCoordinate,
    HarmonyResponse,
    HealthResponse,
    Song,
    SongsResponse,
    SongweavingResponse,
    Vector3,
)


def _song(**overrides):
    payload = {
        "id": "s1",
        "name": "Song of Mending",
        "category": "healing",
        "harmonyType": "restoration",
        "duration": 12,
        "difficulty": 3,
    }
    payload.update(overrides)
    return payload


def test_health_response_from_payload():
    health = HealthResponse.from_payload({"status": "ok", "uptime": 12, "version": "1.2.0"})

    assert health == HealthResponse(status="ok", uptime=12.0, version="1.2.0")


def test_songs_response_decodes_nested_songs():
    response = SongsResponse.from_payload({"songs": [_song(), _song(id="s2")], "totalCount": 2})

    assert response.total_count == 2
    assert [song.id for song in response.songs] == ["s1", "s2"]
    assert response.songs[0].duration == 12.0


def test_song_rejects_unknown_harmony_type():
    with pytest.raises(ValueError):
        Song.from_payload(_song(harmonyType="noise"))


def test_song_rejects_boolean_difficulty():
    with pytest.raises(TypeError):
        Song.from_payload(_song(difficulty=True))


def test_songweaving_response_requires_boolean_success():
    payload = {"success": "yes", "effectRadius": 4, "harmonyDelta": 0.1, "message": "ok"}

    with pytest.raises(TypeError):
        SongweavingResponse.from_payload(payload)

    payload["success"] = True
    assert SongweavingResponse.from_payload(payload).effect_radius == 4.0


def test_harmony_response_accepts_object_position():
    response = HarmonyResponse.from_payload(
        {
            "position": {"x": 1, "y": 2, "z": 3},
            "harmonyLevel": 0.5,
            "dissonanceLevel": 0.25,
            "stabilityIndex": 0.9,
        }
    )

    assert response.position == Vector3(1.0, 2.0, 3.0)


def test_payload_must_be_an_object():
    with pytest.raises(TypeError):
        HealthResponse.from_payload(["ok"])


def test_geometry_validation():
    with pytest.raises(TypeError):
        GridCoordinate(1.5, 2)
    with pytest.raises(ValueError):
        Vector3.from_payload([1, 2])
    assert GridCoordinate.from_payload({"x": 3, "z": 4}).to_payload() == {"x": 3, "z": 4}
